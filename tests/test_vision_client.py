import base64
from types import SimpleNamespace
from unittest.mock import Mock

import httpx
import openai
import pytest

from receipt_extraction.core.exceptions import UpstreamError
from receipt_extraction.core.vision import VisionClient


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(create):
    openai_client = Mock()
    openai_client.chat.completions.create = create
    return VisionClient(api_key="sk-test", model="gpt-4.1-mini", client=openai_client, logger=Mock())


def test_invoke_sends_prompt_and_data_url(png_bytes):
    create = Mock(return_value=_completion('{"total": "1.00"}'))

    reply = _client(create).invoke(png_bytes, "image/png", "Read this")

    assert reply == '{"total": "1.00"}'
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "gpt-4.1-mini"
    text_part, image_part = kwargs["messages"][0]["content"]
    assert text_part == {"type": "text", "text": "Read this"}
    url = image_part["image_url"]["url"]
    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == png_bytes


def test_api_error_becomes_upstream_error(png_bytes):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    create = Mock(side_effect=openai.APIConnectionError(request=request))

    with pytest.raises(UpstreamError):
        _client(create).invoke(png_bytes, "image/png", "Read this")


def test_timeout_becomes_upstream_error(png_bytes):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    create = Mock(side_effect=openai.APITimeoutError(request=request))

    with pytest.raises(UpstreamError, match="timed out"):
        _client(create).invoke(png_bytes, "image/png", "Read this")


@pytest.mark.parametrize("response", [
    SimpleNamespace(choices=[]),
    _completion(None),
    _completion("   "),
])
def test_empty_reply_is_upstream_error(png_bytes, response):
    with pytest.raises(UpstreamError, match="No content"):
        _client(Mock(return_value=response)).invoke(png_bytes, "image/png", "Read this")


def test_default_client_has_timeout_and_no_retries():
    client = VisionClient(api_key="sk-test", timeout_seconds=45)

    assert client.client.max_retries == 0
    assert client.client.timeout == 45


def test_api_key_is_required():
    with pytest.raises(ValueError):
        VisionClient(api_key="")
