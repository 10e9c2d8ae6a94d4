"""Upload validation."""

from typing import Optional

from .constants import (
    BYTES_PER_MB,
    MSG_NO_FILE,
    MSG_UNSUPPORTED_TYPE,
    SUPPORTED_MIME_TYPES,
)
from .exceptions import ImageValidationError
from .models import UploadedImage


def validate_upload(upload: Optional[UploadedImage], max_file_size: int) -> None:
    """Check an upload against the MIME allow-list and the size ceiling.

    The MIME type is trusted as declared; the content is never inspected.
    A file exactly at ``max_file_size`` bytes is accepted.

    Args:
        upload: The candidate image, or None when nothing was selected
        max_file_size: Ceiling in bytes

    Raises:
        ImageValidationError: If the upload is missing, of an unsupported
            type, or larger than the ceiling
    """
    if upload is None:
        raise ImageValidationError(MSG_NO_FILE)

    if upload.mime_type not in SUPPORTED_MIME_TYPES:
        raise ImageValidationError(MSG_UNSUPPORTED_TYPE, f"Declared type: {upload.mime_type}")

    if upload.size > max_file_size:
        raise ImageValidationError(
            f"File size must be less than {max_file_size / BYTES_PER_MB:g}MB. "
            f"Current size: {upload.size / BYTES_PER_MB:.2f}MB"
        )


def format_file_size(num_bytes: int) -> str:
    """Render a byte count for display, e.g. ``1.5 KB``."""
    if num_bytes == 0:
        return "0 Bytes"
    value = float(num_bytes)
    for unit in ("Bytes", "KB", "MB"):
        if value < 1024:
            return f"{round(value, 2):g} {unit}"
        value /= 1024
    return f"{round(value, 2):g} GB"
