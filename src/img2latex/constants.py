"""Constants for the img2latex application.

This module centralizes all magic numbers and strings used throughout
the application to improve maintainability and consistency.
"""

# API Configuration
DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
"""Anthropic Messages API endpoint used for conversions."""

ANTHROPIC_API_VERSION = "2023-06-01"
"""Protocol version sent in the ``anthropic-version`` header."""

DEFAULT_MODEL = "claude-sonnet-4-20250514"
"""Default multimodal model used when none is configured."""

DEFAULT_MAX_TOKENS = 2000
"""Token budget requested for a single conversion."""

DEFAULT_API_TIMEOUT_SECONDS = 60
"""Default timeout for API requests in seconds."""

MAX_API_TIMEOUT_SECONDS = 3600
"""Maximum allowed timeout for API requests in seconds (1 hour)."""

DEFAULT_MAX_RETRIES = 0
"""Conversions are single-attempt unless retries are configured."""

MAX_RETRIES_LIMIT = 10
"""Maximum allowed retry limit."""

# Upload Limits
DEFAULT_MAX_FILE_SIZE_MB = 25
"""Default upload ceiling in megabytes."""

BYTES_PER_MB = 1024 * 1024

SUPPORTED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/webp",
)
"""MIME types accepted for upload."""

SUPPORTED_FORMATS_LABEL = "PNG, JPG, JPEG, GIF, WebP"

MIME_TYPE_OCTET_STREAM = "application/octet-stream"
"""Generic MIME type for files whose type cannot be guessed."""

# Timing
DEMO_DELAY_SECONDS = 2.0
"""Artificial delay before the demo output is produced."""

COPY_ACK_SECONDS = 2.0
"""How long the "copied" acknowledgment stays visible."""

CLIPBOARD_TIMEOUT_SECONDS = 5.0
"""Upper bound for one clipboard tool invocation."""

# Environment Variables
API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"
"""Environment variable name for the API key."""

MAX_FILE_SIZE_ENV_VAR = "IMG2LATEX_MAX_FILE_SIZE_MB"
"""Environment variable name for the upload ceiling."""

# File Names
APPLICATION_NAME = "img2latex"

LOG_FILE_NAME = "img2latex.log"
"""Name of the application log file."""

CONFIG_FILE_NAME = "config.json"
"""Name of the configuration file."""

CLIPBOARD_TEMP_PREFIX = "img2latex-clip-"

# Logging Configuration
DEFAULT_LOG_LEVEL = "INFO"
"""Default logging level for the application."""

DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
"""Default maximum size per log file before rotation."""

DEFAULT_LOG_BACKUP_COUNT = 3
"""Default number of backup log files to keep."""

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
"""Valid logging levels."""

# User-facing Messages
MSG_NO_FILE = "No file selected"
MSG_UNSUPPORTED_TYPE = f"Please upload a valid image file ({SUPPORTED_FORMATS_LABEL})"
MSG_READ_FAILED = "Failed to read the image file"
MSG_NO_IMAGE = "Please upload an image first"
MSG_INVALID_API_KEY = "Invalid API key. Please check your Anthropic API key configuration."
MSG_FORBIDDEN = "Access forbidden. Please check your API key permissions."
MSG_RATE_LIMITED = "Rate limit exceeded. Please wait a moment and try again."
MSG_NETWORK_ERROR = "Network error. Please check your internet connection and try again."
MSG_CONVERSION_FAILED = "Failed to convert image to LaTeX"
MSG_INVALID_RESPONSE = "Invalid response format from API"

# Demo Output
DEMO_LATEX = r"""% Demo LaTeX output - Add your API key for real conversion
\documentclass{article}
\usepackage{amsmath}
\usepackage{amsfonts}

\begin{document}

% This is a demo response. To get real conversions:
% 1. Export ANTHROPIC_API_KEY=your_key_here
% 2. Or run: img2latex config set api_key your_key_here

\begin{equation}
    E = mc^2
\end{equation}

\begin{align}
    \nabla \cdot \vec{E} &= \frac{\rho}{\epsilon_0} \\
    \nabla \cdot \vec{B} &= 0
\end{align}

\end{document}"""
"""Fixed sample output returned in demo mode."""
