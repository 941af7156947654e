import pytest

from receipt_extraction.core.exceptions import ConfigurationError
from receipt_extraction.utils.config import (
    DEFAULT_MAX_SIZE_BYTES,
    Settings,
    UploadPolicy,
    parse_extensions,
)


ENV_VARS = (
    "OPENAI_API_KEY", "OPENAI_API_KEY_SECRET", "OPENAI_MODEL", "OPENAI_TIMEOUT_SECONDS",
    "OPENAI_MAX_TOKENS", "RECEIPT_MAX_SIZE_BYTES", "RECEIPT_ALLOWED_EXTENSIONS", "CORS_ALLOWED_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4.1-mini"
    assert settings.openai_timeout_seconds == 60
    assert settings.upload_policy.max_size_bytes == DEFAULT_MAX_SIZE_BYTES == 10485760
    assert settings.upload_policy.allowed_extensions == {".png", ".jpg", ".jpeg"}
    assert settings.cors_allowed_origins == ("*",)


def test_overrides(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
    monkeypatch.setenv("OPENAI_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("RECEIPT_MAX_SIZE_BYTES", "2097152")
    monkeypatch.setenv("RECEIPT_ALLOWED_EXTENSIONS", "PNG, .webp")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://localhost:4200, http://frontend:4200")

    settings = Settings.from_env()

    assert settings.openai_api_key == "sk-env"
    assert settings.openai_model == "gpt-4o"
    assert settings.openai_timeout_seconds == 12.5
    assert settings.upload_policy.max_size_mb == 2
    assert settings.upload_policy.allowed_extensions == {".png", ".webp"}
    assert settings.cors_allowed_origins == ("http://localhost:4200", "http://frontend:4200")


@pytest.mark.parametrize("name,value", [
    ("RECEIPT_MAX_SIZE_BYTES", "ten"),
    ("RECEIPT_MAX_SIZE_BYTES", "0"),
    ("OPENAI_TIMEOUT_SECONDS", "soon"),
    ("OPENAI_MAX_TOKENS", "1.5"),
])
def test_malformed_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        Settings.from_env()


def test_parse_extensions():
    assert parse_extensions(None) == {".png", ".jpg", ".jpeg"}
    assert parse_extensions("jpg,, .PNG ") == {".jpg", ".png"}


def test_policy_lists_extensions_sorted():
    policy = UploadPolicy(allowed_extensions=frozenset({".png", ".jpeg", ".jpg"}))

    assert policy.sorted_extensions() == (".jpeg", ".jpg", ".png")
