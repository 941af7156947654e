"""
Image format detection from leading magic bytes.
"""

from enum import Enum


class DetectedFormat(Enum):
    PNG = ("png", "image/png", ".png")
    JPEG = ("jpeg", "image/jpeg", ".jpg")
    GIF = ("gif", "image/gif", ".gif")
    WEBP = ("webp", "image/webp", ".webp")
    UNKNOWN_DEFAULT_JPEG = ("unknown", "image/jpeg", ".jpg")

    def __init__(self, label: str, mime_type: str, extension: str):
        self.label = label
        self.mime_type = mime_type
        self.extension = extension

    @property
    def recognized(self) -> bool:
        return self is not DetectedFormat.UNKNOWN_DEFAULT_JPEG


PNG_SIGNATURE = b"\x89PNG"
JPEG_SIGNATURE = b"\xff\xd8\xff"
GIF_SIGNATURE = b"GIF"
RIFF_SIGNATURE = b"RIFF"
WEBP_SIGNATURE = b"WEBP"


def detect_format(data: bytes) -> DetectedFormat:
    """
    Classify an image buffer by its leading bytes.
    
    Never raises: anything unrecognized, including buffers too short to hold
    a signature, is reported as UNKNOWN_DEFAULT_JPEG.
    """
    data = bytes(data or b"")
    if data.startswith(PNG_SIGNATURE):
        return DetectedFormat.PNG
    if data.startswith(JPEG_SIGNATURE):
        return DetectedFormat.JPEG
    if data.startswith(GIF_SIGNATURE):
        return DetectedFormat.GIF
    if len(data) >= 12 and data[:4] == RIFF_SIGNATURE and data[8:12] == WEBP_SIGNATURE:
        return DetectedFormat.WEBP
    return DetectedFormat.UNKNOWN_DEFAULT_JPEG
