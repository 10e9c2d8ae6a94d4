"""Image-to-LaTeX converter backed by the Anthropic Messages API."""

from ._version import __version__
from .client import AnthropicVisionClient
from .config import ConverterConfig, load_config
from .controller import ConverterController
from .models import ConversionResult, UploadedImage
from .state import Converting, Idle, Settled

__all__ = [
    "AnthropicVisionClient",
    "ConverterConfig",
    "ConverterController",
    "ConversionResult",
    "Converting",
    "Idle",
    "Settled",
    "UploadedImage",
    "load_config",
    "__version__",
]
