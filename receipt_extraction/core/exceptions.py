"""
Exception hierarchy for the receipt extraction pipeline.
"""

from enum import Enum


class ReceiptExtractionError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(ReceiptExtractionError, ValueError):
    """Raised when a setting is missing or malformed."""


class ValidationKind(str, Enum):
    EMPTY_FILE = "EmptyFile"
    FILE_TOO_LARGE = "FileTooLarge"
    UNSUPPORTED_TYPE = "UnsupportedType"


class ValidationError(ReceiptExtractionError):
    """Raised when an upload breaks the upload policy. Always user-correctable."""

    def __init__(self, kind: ValidationKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class TransportDecodeError(ReceiptExtractionError):
    """Raised when a base64 request body cannot be decoded."""


class UpstreamError(ReceiptExtractionError):
    """Raised when the vision model or the secret store fails."""


class ClientRequestError(ReceiptExtractionError):
    """Raised by the upload client when a deployed endpoint cannot be reached."""
