"""
Request-scoped value types shared by the pipeline and both deployment faces.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


ExtractedValue = Union[str, int, float]


class ProcessingStatus(str, Enum):
    SUCCESS = "Success"
    ERROR = "Error"


class TransportHint(str, Enum):
    """How the raw request body must be decoded into image bytes."""
    RAW_BINARY = "RawBinary"
    GATEWAY_BASE64 = "GatewayBase64"
    PRE_ENCODED_BASE64 = "PreEncodedBase64"


class FailureKind(str, Enum):
    """Why a request ended in Error. Drives the HTTP status, never serialized."""
    VALIDATION = "validation"
    TRANSPORT = "transport"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


_STATUS_BY_FAILURE = {
    FailureKind.VALIDATION: 400,
    FailureKind.TRANSPORT: 400,
    FailureKind.PAYLOAD_TOO_LARGE: 413,
    FailureKind.UPSTREAM: 500,
    FailureKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class UploadDescriptor:
    filename: Optional[str]
    declared_content_type: Optional[str]
    size_bytes: int
    data: bytes

    @classmethod
    def from_bytes(cls, data: bytes, filename: Optional[str] = None,
                   declared_content_type: Optional[str] = None) -> "UploadDescriptor":
        return cls(
            filename=filename,
            declared_content_type=declared_content_type,
            size_bytes=len(data),
            data=data,
        )


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of one extraction request.
    
    An Error result always carries an error message. Its extracted data is
    empty unless a degraded payload was produced.
    """
    extracted_data: Dict[str, Any]
    status: ProcessingStatus
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error_message: Optional[str] = None
    failure: Optional[FailureKind] = None

    def __post_init__(self):
        if self.status is ProcessingStatus.ERROR and not self.error_message:
            raise ValueError("An Error result requires an error message")

    @classmethod
    def success(cls, extracted_data: Dict[str, Any]) -> "ExtractionResult":
        return cls(extracted_data=extracted_data, status=ProcessingStatus.SUCCESS)

    @classmethod
    def error(cls, message: str, failure: FailureKind) -> "ExtractionResult":
        return cls(
            extracted_data={},
            status=ProcessingStatus.ERROR,
            error_message=message,
            failure=failure,
        )

    @property
    def is_success(self) -> bool:
        return self.status is ProcessingStatus.SUCCESS

    @property
    def http_status(self) -> int:
        if self.is_success:
            return 200
        return _STATUS_BY_FAILURE.get(self.failure, 500)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire shape used by both faces."""
        body: Dict[str, Any] = {
            "extractedData": self.extracted_data,
            "processingStatus": self.status.value,
            "processedAt": self.processed_at.isoformat().replace("+00:00", "Z"),
        }
        if self.error_message is not None:
            body["errorMessage"] = self.error_message
        return body
