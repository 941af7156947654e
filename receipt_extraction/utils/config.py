"""
Environment-driven configuration for receipt extraction service.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from ..core.exceptions import ConfigurationError


DEFAULT_MAX_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg")
DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_TOKENS = 2000


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and make sure it starts with a dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    return extension


def parse_extensions(raw: Optional[str]) -> FrozenSet[str]:
    """Parse a comma separated extension list such as ".png, jpg"."""
    if not raw or not raw.strip():
        return frozenset(DEFAULT_ALLOWED_EXTENSIONS)
    extensions = {normalize_extension(item) for item in raw.split(",")}
    extensions.discard("")
    return frozenset(extensions)


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class UploadPolicy:
    """Size and extension limits applied to every upload."""
    max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES
    allowed_extensions: FrozenSet[str] = field(
        default_factory=lambda: frozenset(DEFAULT_ALLOWED_EXTENSIONS)
    )

    def __post_init__(self):
        extensions = {normalize_extension(extension) for extension in self.allowed_extensions}
        extensions.discard("")
        object.__setattr__(self, "allowed_extensions", frozenset(extensions))

    @property
    def max_size_mb(self) -> int:
        return self.max_size_bytes // 1024 // 1024

    def sorted_extensions(self) -> Tuple[str, ...]:
        return tuple(sorted(self.allowed_extensions))


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by both deployment faces."""
    openai_api_key: Optional[str] = None
    openai_api_key_secret: Optional[str] = None
    openai_model: str = DEFAULT_MODEL
    openai_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    openai_max_tokens: int = DEFAULT_MAX_TOKENS
    upload_policy: UploadPolicy = field(default_factory=UploadPolicy)
    cors_allowed_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.
        
        Raises:
            ConfigurationError: If a numeric variable cannot be parsed or is not positive
        """
        max_size = _int_env("RECEIPT_MAX_SIZE_BYTES", DEFAULT_MAX_SIZE_BYTES)
        if max_size <= 0:
            raise ConfigurationError("RECEIPT_MAX_SIZE_BYTES must be greater than zero")
        timeout = _float_env("OPENAI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
        if timeout <= 0:
            raise ConfigurationError("OPENAI_TIMEOUT_SECONDS must be greater than zero")
        
        origins = tuple(
            origin.strip()
            for origin in os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ) or ("*",)
        
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_api_key_secret=os.getenv("OPENAI_API_KEY_SECRET") or None,
            openai_model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
            openai_timeout_seconds=timeout,
            openai_max_tokens=_int_env("OPENAI_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            upload_policy=UploadPolicy(
                max_size_bytes=max_size,
                allowed_extensions=parse_extensions(os.getenv("RECEIPT_ALLOWED_EXTENSIONS")),
            ),
            cors_allowed_origins=origins,
        )
