"""
Upload policy checks run before any external call.
"""

import logging
from pathlib import PurePosixPath
from typing import Optional

from .exceptions import ValidationError, ValidationKind
from .models import UploadDescriptor
from ..utils.config import UploadPolicy, normalize_extension
from ..utils.logger import get_logger


def file_extension(filename: Optional[str]) -> str:
    """Return the lower-cased extension of a filename, or an empty string."""
    if not filename:
        return ""
    # Browsers on Windows may send full paths
    name = filename.replace("\\", "/")
    return normalize_extension(PurePosixPath(name).suffix)


def validate_upload(upload: Optional[UploadDescriptor], policy: UploadPolicy,
                    logger: Optional[logging.Logger] = None) -> None:
    """
    Check an upload against the policy. First failing check wins.
    
    Args:
        upload: The uploaded file, or None if the request carried no file
        policy: Size and extension limits
        logger: Logger instance for logging output
        
    Raises:
        ValidationError: EmptyFile, FileTooLarge or UnsupportedType
    """
    log = get_logger(logger)
    try:
        _check(upload, policy)
    except ValidationError as e:
        log.warning(f"Upload rejected ({e.kind.value}): {e.message}")
        raise


def _check(upload: Optional[UploadDescriptor], policy: UploadPolicy) -> None:
    if upload is None or upload.size_bytes == 0 or not upload.data:
        raise ValidationError(ValidationKind.EMPTY_FILE, "No file provided")
    
    if upload.size_bytes > policy.max_size_bytes:
        raise ValidationError(
            ValidationKind.FILE_TOO_LARGE,
            f"File size exceeds maximum allowed size of {policy.max_size_mb}MB",
        )
    
    allowed = ", ".join(policy.sorted_extensions())
    extension = file_extension(upload.filename)
    if not extension or extension not in policy.allowed_extensions:
        raise ValidationError(
            ValidationKind.UNSUPPORTED_TYPE,
            f"File type not supported. Allowed types: {allowed}",
        )
    
    content_type = (upload.declared_content_type or "").split(";")[0].strip().lower()
    if content_type and not content_type.startswith("image/") \
            and content_type != "application/octet-stream":
        raise ValidationError(
            ValidationKind.UNSUPPORTED_TYPE,
            f"Content type '{content_type}' not supported. Allowed types: {allowed}",
        )
