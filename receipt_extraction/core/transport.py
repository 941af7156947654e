"""
Turns a request body into image bytes according to its transport hint.
"""

import base64
import binascii
import logging
from typing import Optional, Union

from .exceptions import TransportDecodeError
from .models import TransportHint
from ..utils.logger import get_logger


def decode_payload(payload: Union[bytes, str, None], hint: TransportHint,
                   logger: Optional[logging.Logger] = None) -> bytes:
    """
    Decode a raw request payload into a canonical byte buffer.
    
    Args:
        payload: Request body as received (bytes or text, may be None)
        hint: How the body was encoded in transit
        logger: Logger instance for logging output
        
    Returns:
        Decoded image bytes (may be empty; emptiness is checked by the validator)
        
    Raises:
        TransportDecodeError: If a base64 body is malformed
    """
    log = get_logger(logger)
    if payload is None:
        return b""
    
    if hint in (TransportHint.PRE_ENCODED_BASE64, TransportHint.GATEWAY_BASE64):
        log.info(f"Decoding base64 body ({hint.value})")
        return _decode_base64(payload)
    
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    
    # Text-only raw body: one byte per character. Bytes above U+00FF cannot
    # survive this, and any upstream UTF-8 decoding has already corrupted them.
    log.warning("Using Latin-1 fallback for body decoding; image bytes may be corrupted")
    try:
        return payload.encode("latin-1")
    except UnicodeEncodeError as e:
        raise TransportDecodeError(f"Body is not representable as Latin-1 bytes: {e}") from e


def _decode_base64(payload: Union[bytes, str]) -> bytes:
    if isinstance(payload, str):
        try:
            payload = payload.encode("ascii")
        except UnicodeEncodeError as e:
            raise TransportDecodeError("Body contains non-ASCII characters and is not valid base64") from e
    # Allow line breaks from MIME-style encoders; reject anything else.
    compact = b"".join(bytes(payload).split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise TransportDecodeError(f"Invalid base64 body: {e}") from e
