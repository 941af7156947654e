"""
AWS Lambda handler for receipt extraction service.

This module serves API Gateway proxy events. The OpenAI API key is read from
Secrets Manager once per container and shared by every invocation.
"""

import json
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..core.credentials import CachedCredential, SecretsManagerCredentialSource
from ..core.exceptions import TransportDecodeError
from ..core.models import ExtractionResult, FailureKind, TransportHint
from ..core.processor import INTERNAL_ERROR_MESSAGE, ReceiptExtractor
from ..core.transport import decode_payload
from ..utils.config import Settings
from ..utils.logger import setup_logger


FILE_ENCODING_HEADER = "x-file-content-encoding"
FILE_NAME_HEADER = "x-file-name"

logger = setup_logger("receipt-extraction", enable_file_logging=False)

_extractor: Optional[ReceiptExtractor] = None
_extractor_lock = threading.Lock()


def get_extractor() -> ReceiptExtractor:
    """Build the container-wide extractor on first use."""
    global _extractor
    if _extractor is None:
        with _extractor_lock:
            if _extractor is None:
                settings = Settings.from_env()
                credential = CachedCredential(SecretsManagerCredentialSource(
                    settings.openai_api_key_secret, logger=logger
                ))
                _extractor = ReceiptExtractor(settings=settings, credential=credential, logger=logger)
    return _extractor


def cors_headers(content_type: str = "application/json") -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET,HEAD,OPTIONS,POST,PUT,DELETE",
        "Access-Control-Allow-Headers": "*",
        "Content-Type": content_type,
    }


def _response(status_code: int, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": cors_headers(),
        "body": json.dumps(body) if body is not None else "",
        "isBase64Encoded": False,
    }


def _header(event: Dict[str, Any], name: str) -> Optional[str]:
    for key, value in (event.get("headers") or {}).items():
        if key.lower() == name:
            return value
    return None


def _route_path(event: Dict[str, Any]) -> str:
    proxy = (event.get("pathParameters") or {}).get("proxy")
    if proxy is not None:
        return proxy.strip("/")
    path = (event.get("path") or "").strip("/")
    if path.lower().startswith("api/"):
        path = path[4:]
    return path


def handle_hello(path: str) -> Dict[str, Any]:
    parts = path.split("/", 1)
    name = parts[1].strip() if len(parts) > 1 else ""
    greeting = f"Hello {name} from Python Lambda!" if name else "Hello World from Python Lambda!"
    return _response(200, {
        "message": greeting,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    })


def handle_receipt_extract(event: Dict[str, Any], extractor: ReceiptExtractor) -> Dict[str, Any]:
    """
    Decode the request body per its transport hint and run the pipeline.
    
    Args:
        event: API Gateway proxy event
        extractor: Shared pipeline instance
        
    Returns:
        API Gateway proxy response carrying an ExtractionResult
    """
    body = event.get("body")
    is_base64 = bool(event.get("isBase64Encoded"))
    file_encoding = (_header(event, FILE_ENCODING_HEADER) or "binary").strip().lower()
    logger.info(f"IsBase64Encoded: {is_base64}")
    logger.info(f"Content-Type: {_header(event, 'content-type') or 'unknown'}")
    logger.info(f"X-File-Content-Encoding: {file_encoding}")
    
    if file_encoding == "base64":
        hint = TransportHint.PRE_ENCODED_BASE64
        if is_base64:
            # Gateway wrapped the already base64 text once more
            try:
                body = decode_payload(body, TransportHint.GATEWAY_BASE64, logger=logger)
            except TransportDecodeError as e:
                logger.warning(f"Transport decode failed: {e}")
                result = ExtractionResult.error("Request body is not valid base64", FailureKind.TRANSPORT)
                return _response(result.http_status, result.to_dict())
    elif is_base64:
        hint = TransportHint.GATEWAY_BASE64
    else:
        hint = TransportHint.RAW_BINARY
    
    result = extractor.extract(
        body,
        hint,
        filename=_header(event, FILE_NAME_HEADER),
        content_type=_header(event, "content-type") if hint is TransportHint.RAW_BINARY else None,
    )
    return _response(result.http_status, result.to_dict())


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda handler for API Gateway proxy requests.
    
    Args:
        event: API Gateway proxy event
        context: Lambda context object
        
    Returns:
        API Gateway proxy response with CORS headers
    """
    method = (event.get("httpMethod") or "").upper()
    path = _route_path(event)
    logger.info(f"Request: {method} {path}")
    
    try:
        if method == "OPTIONS":
            return _response(200)
        
        lowered = path.lower()
        if lowered.startswith("hello"):
            return handle_hello(path)
        if lowered.startswith("receipt/extract"):
            return handle_receipt_extract(event, get_extractor())
        
        return _response(404, {"error": "Not Found"})
    
    except Exception as e:
        logger.error(f"Unexpected error in Lambda handler: {str(e)}", exc_info=True)
        result = ExtractionResult.error(INTERNAL_ERROR_MESSAGE, FailureKind.INTERNAL)
        return _response(500, result.to_dict())
