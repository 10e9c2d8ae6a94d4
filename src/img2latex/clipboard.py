"""System clipboard access.

The primary path pipes text straight into the first clipboard tool that
accepts it. The fallback path needs no tool at all: the text is staged in a
transient holder file and replayed to the terminal as an OSC 52 escape
sequence, which asks the terminal emulator to set its clipboard.
"""

import base64
import os
import pathlib
import shutil
import subprocess
import tempfile
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from .constants import CLIPBOARD_TEMP_PREFIX, CLIPBOARD_TIMEOUT_SECONDS
from .exceptions import ClipboardError
from .logging import get_logger
from .paths import XDGPaths

ClipboardWriter = Callable[[str], None]

CLIPBOARD_COMMANDS: List[List[str]] = [
    ["pbcopy"],
    ["clip"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
]

# OSC 52 "set clipboard" request, terminated by ST
OSC52_TEMPLATE = "\x1b]52;c;{payload}\x1b\\"

logger = get_logger(__name__)


def available_commands(commands: Sequence[List[str]] = CLIPBOARD_COMMANDS) -> List[List[str]]:
    """Return the clipboard commands installed on this system."""
    return [cmd for cmd in commands if shutil.which(cmd[0]) is not None]


def system_clipboard_copy(text: str, timeout: float = CLIPBOARD_TIMEOUT_SECONDS) -> None:
    """Pipe text to the first clipboard tool that accepts it.

    Output streams are discarded rather than captured: xclip and wl-copy
    leave a child behind to serve the selection, and it would hold a
    captured pipe open.

    Raises:
        ClipboardError: If no tool is installed or every tool fails
    """
    commands = available_commands()
    if not commands:
        raise ClipboardError("No clipboard tool available")

    for cmd in commands:
        try:
            subprocess.run(
                cmd,
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=timeout,
            )
            return
        except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            logger.debug("Clipboard command failed", command=cmd[0], error=str(e))

    raise ClipboardError("Every clipboard tool failed")


def terminal_clipboard_copy(
    text: str,
    console: Optional[Console] = None,
    directory: Optional[pathlib.Path] = None,
) -> None:
    """Set the terminal's clipboard with an OSC 52 escape sequence.

    The text is written to a holder file in the cache directory and the
    sequence is built from the file's bytes. The holder is always removed.

    Raises:
        ClipboardError: If the console is not attached to a terminal
    """
    console = console or Console(stderr=True)
    if not console.is_terminal:
        raise ClipboardError("Clipboard fallback needs an interactive terminal")

    directory = directory or XDGPaths.get_cache_dir()
    fd, name = tempfile.mkstemp(prefix=CLIPBOARD_TEMP_PREFIX, suffix=".tex", dir=directory)
    holder = pathlib.Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)

        payload = base64.b64encode(holder.read_bytes()).decode("ascii")
        console.file.write(OSC52_TEMPLATE.format(payload=payload))
        console.file.flush()
    finally:
        holder.unlink(missing_ok=True)


class Clipboard:
    """Clipboard with a primary writer and a fallback writer."""

    def __init__(
        self,
        primary: ClipboardWriter = system_clipboard_copy,
        fallback: ClipboardWriter = terminal_clipboard_copy,
    ) -> None:
        self.primary = primary
        self.fallback = fallback

    def copy(self, text: str) -> bool:
        """Copy text, trying the fallback when the primary writer fails.

        Returns:
            True if either writer succeeded. Failures are logged, not raised.
        """
        try:
            self.primary(text)
            return True
        except (ClipboardError, OSError) as e:
            logger.info("Primary clipboard write failed, using fallback", error=str(e))

        try:
            self.fallback(text)
            return True
        except (ClipboardError, OSError) as e:
            logger.warning("Clipboard fallback failed", error=str(e))
            return False
