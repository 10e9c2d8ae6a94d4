"""Unit tests for upload validation."""

import pytest
from factories import ImageFactory

from img2latex.constants import BYTES_PER_MB, SUPPORTED_MIME_TYPES
from img2latex.exceptions import ImageValidationError
from img2latex.validation import format_file_size, validate_upload

CEILING = 25 * BYTES_PER_MB


class TestValidateUpload:
    """Test the MIME allow-list and size ceiling."""

    def test_missing_file_is_rejected(self):
        with pytest.raises(ImageValidationError, match="No file selected"):
            validate_upload(None, CEILING)

    @pytest.mark.parametrize("mime_type", SUPPORTED_MIME_TYPES)
    def test_allowed_types_within_ceiling_pass(self, mime_type):
        assert validate_upload(ImageFactory.create_declared(mime_type, 1024), CEILING) is None

    @pytest.mark.parametrize(
        "mime_type", ["application/pdf", "image/svg+xml", "image/bmp", "text/plain", ""]
    )
    @pytest.mark.parametrize("size", [0, 10, CEILING + 1])
    def test_disallowed_types_rejected_regardless_of_size(self, mime_type, size):
        upload = ImageFactory.create_declared(mime_type, size)

        with pytest.raises(ImageValidationError) as exc_info:
            validate_upload(upload, CEILING)

        assert exc_info.value.message == (
            "Please upload a valid image file (PNG, JPG, JPEG, GIF, WebP)"
        )

    def test_size_exactly_at_ceiling_passes(self):
        upload = ImageFactory.create_declared("image/png", CEILING)
        assert validate_upload(upload, CEILING) is None

    def test_one_byte_over_ceiling_is_rejected(self):
        upload = ImageFactory.create_declared("image/png", CEILING + 1)

        with pytest.raises(ImageValidationError) as exc_info:
            validate_upload(upload, CEILING)

        assert exc_info.value.message == (
            "File size must be less than 25MB. Current size: 25.00MB"
        )

    def test_size_message_reports_current_size(self):
        upload = ImageFactory.create_declared("image/jpeg", 3 * BYTES_PER_MB)

        with pytest.raises(ImageValidationError, match="less than 2MB. Current size: 3.00MB"):
            validate_upload(upload, 2 * BYTES_PER_MB)

    def test_content_is_not_inspected(self):
        """A text payload declared as PNG is trusted."""
        upload = ImageFactory.create_png(content=b"definitely not a png")
        assert validate_upload(upload, CEILING) is None


class TestFormatFileSize:
    @pytest.mark.parametrize(
        "num_bytes, expected",
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1536, "1.5 KB"),
            (BYTES_PER_MB, "1 MB"),
            (int(2.25 * BYTES_PER_MB), "2.25 MB"),
            (3 * 1024 * BYTES_PER_MB, "3 GB"),
        ],
    )
    def test_format_file_size(self, num_bytes, expected):
        assert format_file_size(num_bytes) == expected
