"""Session controller owning all converter state.

The controller is the only writer of session state. Long-running work
(reading the image, the demo delay, the API call) captures the attempt
generation when it starts; :meth:`ConverterController.reset` and
:meth:`ConverterController.upload` advance the generation, and any
completion carrying an older generation is dropped.
"""

import asyncio
import pathlib
from typing import Callable, Optional, Union

from .client import AnthropicVisionClient
from .clipboard import Clipboard
from .config import ConverterConfig
from .constants import DEMO_LATEX, MSG_CONVERSION_FAILED, MSG_NO_IMAGE
from .exceptions import Img2LatexError
from .files import describe_image, encode_base64, encode_data_url
from .logging import get_logger
from .models import ConversionRequest, ConversionResult, UploadedImage
from .prompts import build_prompt
from .state import ConversionState, Converting, Idle, Settled
from .validation import validate_upload

ClientFactory = Callable[[ConverterConfig], AnthropicVisionClient]
ImageSource = Union[str, pathlib.Path, UploadedImage, None]


class ConverterController:
    """Drives upload, conversion, copy and reset for one session."""

    def __init__(
        self,
        config: ConverterConfig,
        client_factory: Optional[ClientFactory] = None,
        clipboard: Optional[Clipboard] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Configuration injected at startup
            client_factory: Builds an API client for live conversions
            clipboard: Clipboard used by :meth:`copy_result`
        """
        self.config = config
        self.logger = get_logger(__name__)
        self._client_factory = client_factory or AnthropicVisionClient
        self.clipboard = clipboard or Clipboard()

        self.state: ConversionState = Idle()
        self.image: Optional[UploadedImage] = None
        self.preview: Optional[str] = None
        self.instructions = ""
        self.copied = False
        self._generation = 0
        self._copy_ack_handle: Optional[asyncio.TimerHandle] = None

    # Derived views
    @property
    def generation(self) -> int:
        return self._generation

    @property
    def demo_mode(self) -> bool:
        return not self.config.has_credential

    @property
    def is_converting(self) -> bool:
        return isinstance(self.state, Converting)

    @property
    def result(self) -> Optional[ConversionResult]:
        return self.state.result if isinstance(self.state, Settled) else None

    @property
    def error(self) -> Optional[str]:
        return self.state.error if isinstance(self.state, Settled) else None

    def set_instructions(self, instructions: str) -> None:
        self.instructions = instructions

    # Upload
    async def upload(self, source: ImageSource) -> bool:
        """Validate a new image and build its preview.

        Any previous result and error are cleared before validation runs.
        On a validation failure the previously active image stays active.

        Args:
            source: Path to an image, an UploadedImage, or None

        Returns:
            True if the image became the active image
        """
        generation = self._advance_generation()
        self.state = Idle()
        self._clear_copied()

        try:
            upload = source
            if isinstance(source, (str, pathlib.Path)):
                upload = describe_image(source)
            validate_upload(upload, self.config.max_file_size)
        except Img2LatexError as e:
            self.logger.warning("Upload rejected", error=e.message, details=e.details)
            self.state = Settled.failure(generation, e.message)
            return False

        self.image = upload
        self.preview = None
        self.logger.info(
            "Image accepted", name=upload.name, mime_type=upload.mime_type, size=upload.size
        )

        try:
            preview = await asyncio.to_thread(encode_data_url, upload)
        except Img2LatexError as e:
            self.logger.error("Preview generation failed", error=e.message, details=e.details)
            if generation == self._generation:
                self.image = None
                self.state = Settled.failure(generation, e.message)
            return False

        if generation != self._generation:
            self.logger.debug("Discarding stale preview", generation=generation)
            return False

        self.preview = preview
        return True

    # Conversion
    async def convert(self) -> ConversionState:
        """Run one conversion attempt and settle its outcome.

        Returns:
            The state after the attempt. A stale attempt leaves the current
            state untouched.
        """
        if self.image is None:
            self.state = Settled.failure(self._generation, MSG_NO_IMAGE)
            return self.state

        if self.is_converting:
            return self.state

        generation = self._generation
        image = self.image
        instructions = self.instructions
        self.state = Converting(generation)
        self._clear_copied()

        outcome: Optional[Settled] = None
        try:
            if self.demo_mode:
                result = await self._demo_conversion()
            else:
                result = await self._live_conversion(image, instructions)
            outcome = Settled.success(generation, result)
        except Img2LatexError as e:
            self.logger.error(
                "Conversion failed",
                error_type=type(e).__name__,
                error=e.message,
                details=e.details,
            )
            outcome = Settled.failure(generation, e.message)
        except Exception as e:
            self.logger.exception("Unexpected conversion failure")
            outcome = Settled.failure(generation, f"{MSG_CONVERSION_FAILED}: {e}")
        finally:
            if generation != self._generation:
                self.logger.info("Discarding stale conversion outcome", generation=generation)
            elif outcome is None:
                self.state = Idle()
            else:
                self.state = outcome

        return self.state

    async def _demo_conversion(self) -> ConversionResult:
        self.logger.info("No API key configured, producing demo output")
        await asyncio.sleep(self.config.demo_delay_seconds)
        return ConversionResult(text=DEMO_LATEX, demo=True)

    async def _live_conversion(
        self, image: UploadedImage, instructions: str
    ) -> ConversionResult:
        image_data = await asyncio.to_thread(encode_base64, image)
        request = ConversionRequest(
            image_data=image_data,
            media_type=image.mime_type,
            instructions=instructions,
            prompt=build_prompt(instructions),
        )

        async with self._client_factory(self.config) as client:
            text = await client.convert(request)

        self.logger.info("Conversion succeeded", characters=len(text))
        return ConversionResult(text=text)

    # Copy
    async def copy_result(self) -> bool:
        """Copy the current result to the clipboard.

        The "copied" acknowledgment is shown whenever there is a result,
        even if both clipboard paths fail.

        Returns:
            False when there is nothing to copy, or when the result was
            replaced or cleared while the copy ran
        """
        result = self.result
        if result is None:
            return False

        generation = self._generation
        await asyncio.to_thread(self.clipboard.copy, result.text)
        if generation != self._generation or self.result is not result:
            self.logger.debug("Discarding stale copy acknowledgment", generation=generation)
            return False

        self._acknowledge_copy()
        return True

    def _acknowledge_copy(self) -> None:
        self._clear_copied()
        self.copied = True
        loop = asyncio.get_running_loop()
        self._copy_ack_handle = loop.call_later(self.config.copy_ack_seconds, self._expire_copied)

    def _expire_copied(self) -> None:
        self.copied = False
        self._copy_ack_handle = None

    def _clear_copied(self) -> None:
        if self._copy_ack_handle is not None:
            self._copy_ack_handle.cancel()
            self._copy_ack_handle = None
        self.copied = False

    # Reset
    def clear_error(self) -> None:
        """Dismiss a displayed error."""
        if self.error is not None:
            self.state = Idle()

    def reset(self) -> None:
        """Return to a fresh session. Pending work is orphaned, not cancelled."""
        self._advance_generation()
        self.state = Idle()
        self.image = None
        self.preview = None
        self.instructions = ""
        self._clear_copied()

    def _advance_generation(self) -> int:
        self._generation += 1
        return self._generation
