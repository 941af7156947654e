"""
Receipt extraction pipeline shared by the HTTP and Lambda handlers.

This module contains the ReceiptExtractor class that takes a request body,
decodes and validates it, asks the vision model for the receipt fields, and
turns the reply into an ExtractionResult.
"""

import logging
import threading
from typing import Any, Callable, Optional, Union

from .credentials import CachedCredential, StaticCredentialSource
from .exceptions import (
    TransportDecodeError,
    UpstreamError,
    ValidationError,
)
from .image_format import detect_format
from .mock_data import build_mock_receipt, is_credential_configured
from .models import ExtractionResult, FailureKind, TransportHint, UploadDescriptor
from .parser import parse_extraction_response
from .prompt import build_extraction_prompt
from .transport import decode_payload
from .validation import validate_upload
from .vision import VisionClient
from ..utils.config import Settings, UploadPolicy
from ..utils.logger import get_logger


UPSTREAM_ERROR_MESSAGE = "Failed to process receipt"
INTERNAL_ERROR_MESSAGE = "Internal server error occurred while processing the image"
DEFAULT_FILENAME_STEM = "receipt"


class ReceiptExtractor:
    """
    Receipt extraction service using the OpenAI vision API.
    
    Each call to extract() is one-shot: decode, sniff, validate, then either
    the mock record (no credential) or one model call followed by parsing.
    The credential and the OpenAI client are resolved once per instance and
    shared by concurrent requests.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 credential: Optional[CachedCredential] = None,
                 vision_client: Optional[Any] = None,
                 vision_client_factory: Optional[Callable[[str], Any]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the extractor.
        
        Args:
            settings: Runtime settings (if None, read from the environment)
            credential: Where the OpenAI API key comes from (default: settings.openai_api_key)
            vision_client: Ready-made client exposing invoke(); skips client creation
            vision_client_factory: Builds a client from an API key
            logger: Logger instance for logging output
        """
        self.logger = get_logger(logger)
        self.settings = settings or Settings.from_env()
        self.credential = credential or CachedCredential(
            StaticCredentialSource(self.settings.openai_api_key)
        )
        self._vision_client = vision_client
        self._vision_client_factory = vision_client_factory or self._default_vision_client
        self._client_lock = threading.Lock()

    @property
    def upload_policy(self) -> UploadPolicy:
        return self.settings.upload_policy

    def _log(self, message: str, level: str = "info", **kwargs):
        getattr(self.logger, level)(message, **kwargs)

    def _default_vision_client(self, api_key: str) -> VisionClient:
        return VisionClient(
            api_key=api_key,
            model=self.settings.openai_model,
            timeout_seconds=self.settings.openai_timeout_seconds,
            max_tokens=self.settings.openai_max_tokens,
            logger=self.logger,
        )

    def _get_vision_client(self, api_key: str):
        if self._vision_client is None:
            with self._client_lock:
                if self._vision_client is None:
                    self._vision_client = self._vision_client_factory(api_key)
        return self._vision_client

    def extract(self, payload: Union[bytes, str, None],
                transport_hint: TransportHint = TransportHint.RAW_BINARY,
                filename: Optional[str] = None,
                content_type: Optional[str] = None) -> ExtractionResult:
        """
        Run the full pipeline on one request body.
        
        Args:
            payload: Request body as received by the handler
            transport_hint: How the body must be decoded
            filename: Uploaded filename; if None, derived from the detected format.
                An empty string is kept and fails the extension check.
            content_type: Declared content type of the upload, if any
            
        Returns:
            ExtractionResult. Never raises.
        """
        try:
            return self._extract(payload, transport_hint, filename, content_type)
        except ValidationError as e:
            return ExtractionResult.error(e.message, FailureKind.VALIDATION)
        except TransportDecodeError as e:
            self._log(f"Transport decode failed: {e}", "warning")
            return ExtractionResult.error(
                "Request body is not valid base64", FailureKind.TRANSPORT
            )
        except UpstreamError as e:
            self._log(f"Upstream failure: {e}", "error", exc_info=True)
            return ExtractionResult.error(UPSTREAM_ERROR_MESSAGE, FailureKind.UPSTREAM)
        except Exception as e:
            self._log(f"Error extracting receipt data: {e}", "error", exc_info=True)
            return ExtractionResult.error(INTERNAL_ERROR_MESSAGE, FailureKind.INTERNAL)

    def _extract(self, payload, transport_hint, filename, content_type) -> ExtractionResult:
        image_bytes = decode_payload(payload, transport_hint, logger=self.logger)
        self._log(f"Image bytes length: {len(image_bytes)}")
        self._log(f"First bytes: {image_bytes[:20].hex(' ')}", "debug")
        
        detected = detect_format(image_bytes)
        if detected.recognized:
            self._log(f"Detected MIME type: {detected.mime_type}")
        else:
            self._log("Image format not recognized, defaulting to image/jpeg", "warning")
        
        if filename is None:
            filename = f"{DEFAULT_FILENAME_STEM}{detected.extension}"
        upload = UploadDescriptor.from_bytes(image_bytes, filename, content_type)
        validate_upload(upload, self.upload_policy, logger=self.logger)
        
        declared = (content_type or "").split(";")[0].strip().lower()
        if declared.startswith("image/") and detected.recognized and declared != detected.mime_type:
            self._log(
                f"Declared content type {declared} does not match detected {detected.mime_type}",
                "warning",
            )
        
        self._log(f"Processing receipt image: {filename}")
        
        api_key = self.credential.get()
        if not is_credential_configured(api_key):
            self._log("OpenAI API key not configured, returning mock data", "warning")
            return ExtractionResult.success(build_mock_receipt())
        
        client = self._get_vision_client(api_key)
        reply = client.invoke(image_bytes, detected.mime_type, build_extraction_prompt())
        extracted = parse_extraction_response(reply, logger=self.logger)
        
        self._log(f"Successfully extracted {len(extracted)} fields from receipt")
        return ExtractionResult.success(extracted)
