"""File handling utilities for images to convert."""

import base64
import mimetypes
import pathlib
from typing import Union

from .constants import MIME_TYPE_OCTET_STREAM, MSG_READ_FAILED
from .exceptions import ImageReadError
from .models import UploadedImage


def get_mime_type(path: pathlib.Path) -> str:
    """Get the MIME type for a file path from its extension.

    Args:
        path: File path

    Returns:
        MIME type string
    """
    ext = path.suffix.lower()

    # Handle specific cases for consistency across platforms
    if ext == ".png":
        return "image/png"
    elif ext in {".jpg", ".jpeg"}:
        return "image/jpeg"
    elif ext == ".webp":
        return "image/webp"
    elif ext == ".gif":
        return "image/gif"

    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or MIME_TYPE_OCTET_STREAM


def describe_image(path: Union[str, pathlib.Path]) -> UploadedImage:
    """Build an upload handle for a file on disk without reading its content.

    Args:
        path: Path to the image

    Returns:
        UploadedImage whose content is read lazily from ``path``

    Raises:
        ImageReadError: If the file cannot be accessed
    """
    path = pathlib.Path(path)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ImageReadError(MSG_READ_FAILED, str(e))

    if not path.is_file():
        raise ImageReadError(MSG_READ_FAILED, f"Not a file: {path}")

    return UploadedImage(name=path.name, mime_type=get_mime_type(path), size=size, path=path)


def encode_base64(image: UploadedImage) -> str:
    """Encode the image content to a base64 string.

    Raises:
        ImageReadError: If the content cannot be read
    """
    return base64.b64encode(image.read_bytes()).decode("utf-8")


def encode_data_url(image: UploadedImage) -> str:
    """Encode the image content to data URL format (data:mime/type;base64,...).

    Raises:
        ImageReadError: If the content cannot be read
    """
    return f"data:{image.mime_type};base64,{encode_base64(image)}"
