import base64
import os
from unittest.mock import Mock

import pytest

from receipt_extraction.core.exceptions import TransportDecodeError
from receipt_extraction.core.models import TransportHint
from receipt_extraction.core.transport import decode_payload


def test_pre_encoded_base64_round_trip():
    original = os.urandom(512)
    encoded = base64.b64encode(original).decode("ascii")

    assert decode_payload(encoded, TransportHint.PRE_ENCODED_BASE64) == original


def test_gateway_base64_accepts_bytes_body(png_bytes):
    encoded = base64.b64encode(png_bytes)

    assert decode_payload(encoded, TransportHint.GATEWAY_BASE64) == png_bytes


def test_base64_with_line_breaks_is_accepted(png_bytes):
    encoded = base64.encodebytes(png_bytes * 4).decode("ascii")
    assert "\n" in encoded

    assert decode_payload(encoded, TransportHint.PRE_ENCODED_BASE64) == png_bytes * 4


@pytest.mark.parametrize("body", ["not base64!!", "abc", "ÿØÿ"])
def test_invalid_base64_raises(body):
    with pytest.raises(TransportDecodeError):
        decode_payload(body, TransportHint.PRE_ENCODED_BASE64)


def test_raw_binary_bytes_are_used_verbatim(png_bytes):
    logger = Mock()

    assert decode_payload(png_bytes, TransportHint.RAW_BINARY, logger=logger) == png_bytes
    logger.warning.assert_not_called()


def test_raw_text_uses_latin1_fallback_and_warns(png_bytes):
    logger = Mock()
    text = png_bytes.decode("latin-1")

    assert decode_payload(text, TransportHint.RAW_BINARY, logger=logger) == png_bytes
    logger.warning.assert_called_once()
    assert "Latin-1" in logger.warning.call_args[0][0]


def test_raw_text_outside_latin1_raises():
    with pytest.raises(TransportDecodeError):
        decode_payload("receipt \u20ac", TransportHint.RAW_BINARY, logger=Mock())


def test_missing_body_decodes_to_empty_buffer():
    assert decode_payload(None, TransportHint.GATEWAY_BASE64) == b""
    assert decode_payload("", TransportHint.PRE_ENCODED_BASE64) == b""
