import pytest

from receipt_extraction.core.credentials import CachedCredential, StaticCredentialSource
from receipt_extraction.core.processor import ReceiptExtractor
from receipt_extraction.utils.config import Settings, UploadPolicy


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32
GIF_BYTES = b"GIF89a" + b"\x00" * 32


class FakeVisionClient:
    """Stands in for VisionClient and records every call."""

    def __init__(self, reply='{"total": "9.50"}', error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def invoke(self, image_bytes, mime_type, prompt):
        self.calls.append({"image_bytes": image_bytes, "mime_type": mime_type, "prompt": prompt})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes():
    return JPEG_BYTES


@pytest.fixture
def gif_bytes():
    return GIF_BYTES


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def fake_vision():
    return FakeVisionClient()


@pytest.fixture
def make_extractor(settings):
    def _make(api_key="sk-test", vision=None, policy=None):
        effective = Settings(upload_policy=policy) if policy is not None else settings
        return ReceiptExtractor(
            settings=effective,
            credential=CachedCredential(StaticCredentialSource(api_key)),
            vision_client=vision if vision is not None else FakeVisionClient(),
        )
    return _make


@pytest.fixture
def small_policy():
    return UploadPolicy(max_size_bytes=2 * 1024 * 1024)
