"""Terminal rendering for conversion sessions."""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .models import ConversionResult, UploadedImage
from .validation import format_file_size


class ConversionDisplay:
    """Renders images, results, errors and configuration with rich."""

    def __init__(
        self, console: Optional[Console] = None, error_console: Optional[Console] = None
    ) -> None:
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def demo_banner(self) -> None:
        self.console.print(
            Panel(
                "Set ANTHROPIC_API_KEY or run [bold]img2latex config set api_key KEY[/bold] "
                "for real conversions. Currently running in demo mode with sample output.\n"
                "Get your API key from: https://console.anthropic.com/",
                title="Demo Mode - API Key Missing",
                border_style="yellow",
            )
        )

    def image_summary(self, image: UploadedImage) -> None:
        self.console.print(
            f"[bold]{escape(image.name)}[/bold] {format_file_size(image.size)} • {image.mime_type}"
        )

    @contextmanager
    def converting(self, demo: bool) -> Iterator[None]:
        """Show a spinner while a conversion runs."""
        message = "Generating Demo..." if demo else "Converting..."
        with self.console.status(message, spinner="dots"):
            yield

    def result(self, result: ConversionResult) -> None:
        self.console.print(
            Panel(
                Syntax(result.text, "latex", word_wrap=True),
                title="Generated LaTeX Code",
                border_style="green",
            )
        )
        self.console.print(
            f"{result.line_count} lines • {result.char_count} characters • Ready for Overleaf",
            style="dim",
        )

    def copied(self) -> None:
        self.console.print("Copied!", style="green")

    def error(self, message: str) -> None:
        self.error_console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def configuration(self, rows: Dict[str, Any], title: str = "Current Configuration") -> None:
        table = Table(title=title)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key, value in rows.items():
            table.add_row(key, str(value))
        self.console.print(table)
