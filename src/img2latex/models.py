"""Data models for img2latex."""

import pathlib
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import MSG_READ_FAILED
from .exceptions import ImageReadError


class UploadedImage(BaseModel):
    """An image handed to the converter.

    Holds the declared metadata and either the raw bytes or the path they
    can be read from. The content is read on demand, so the preview and the
    request payload are encoded independently.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    size: int = Field(ge=0)
    path: Optional[pathlib.Path] = None
    content: Optional[bytes] = Field(default=None, repr=False)

    @classmethod
    def from_bytes(cls, name: str, content: bytes, mime_type: str) -> "UploadedImage":
        """Create an image from in-memory bytes."""
        return cls(name=name, mime_type=mime_type, size=len(content), content=content)

    def read_bytes(self) -> bytes:
        """Return the image content.

        Raises:
            ImageReadError: If the content is unavailable or unreadable
        """
        if self.content is not None:
            return self.content
        if self.path is None:
            raise ImageReadError(MSG_READ_FAILED, f"No content for {self.name}")
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ImageReadError(MSG_READ_FAILED, str(e))


class ConversionRequest(BaseModel):
    """Transient request for one outbound conversion call."""

    model_config = ConfigDict(frozen=True)

    image_data: str = Field(repr=False)
    media_type: str
    instructions: str = ""
    prompt: str

    def to_payload(self, model: str, max_tokens: int) -> Dict[str, Any]:
        """Build the Messages API request body.

        The user message carries two ordered parts: the image, then the prompt.
        """
        return {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": self.media_type,
                                "data": self.image_data,
                            },
                        },
                        {"type": "text", "text": self.prompt},
                    ],
                }
            ],
        }


class ConversionResult(BaseModel):
    """Generated LaTeX for one settled conversion."""

    model_config = ConfigDict(frozen=True)

    text: str
    demo: bool = False

    @property
    def line_count(self) -> int:
        return len(self.text.split("\n"))

    @property
    def char_count(self) -> int:
        return len(self.text)


# API response structures
class ContentBlock(BaseModel):
    """One content part of a Messages API response."""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    text: Optional[str] = None


class MessagesResponse(BaseModel):
    """Successful Messages API response body."""

    model_config = ConfigDict(extra="allow")

    content: List[ContentBlock] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned with non-success statuses."""

    model_config = ConfigDict(extra="allow")

    error: Optional[ErrorDetail] = None
