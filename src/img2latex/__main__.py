import argparse
import asyncio
import pathlib
import sys
import time
from typing import List, Optional

from img2latex._version import __version__
from img2latex.clipboard import Clipboard
from img2latex.config import CONFIGURABLE_KEYS, ConfigurationManager, ConverterConfig, load_config
from img2latex.constants import DEFAULT_LOG_LEVEL, LOG_LEVELS
from img2latex.controller import ConverterController
from img2latex.display import ConversionDisplay
from img2latex.exceptions import Img2LatexError
from img2latex.logging import get_logger, setup_logging
from img2latex.paths import XDGPaths


def read_instructions(args: argparse.Namespace) -> str:
    """Collect free-text instructions from the command line or a file."""
    if args.instructions_file:
        return pathlib.Path(args.instructions_file).read_text(encoding="utf-8")
    return args.instructions or ""


async def run_conversion(
    args: argparse.Namespace,
    config: ConverterConfig,
    display: ConversionDisplay,
    clipboard: Optional[Clipboard] = None,
) -> int:
    """Upload, convert and optionally copy or save one image.

    Returns:
        Process exit status
    """
    controller = ConverterController(config, clipboard=clipboard)
    if controller.demo_mode:
        display.demo_banner()

    controller.set_instructions(read_instructions(args))

    if not await controller.upload(args.image):
        display.error(controller.error or "Failed to read the image file")
        return 1
    display.image_summary(controller.image)

    with display.converting(controller.demo_mode):
        await controller.convert()

    result = controller.result
    if result is None:
        display.error(controller.error or "Conversion did not complete")
        return 1

    display.result(result)

    if args.output:
        output_path = pathlib.Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.text + "\n", encoding="utf-8")
        display.console.print(f"Saved to {output_path}")

    if args.copy:
        await controller.copy_result()
        if controller.copied:
            display.copied()

    return 0


def handle_convert_command(args: argparse.Namespace, display: ConversionDisplay) -> int:
    """Handle the image conversion command."""
    config = load_config(api_key=args.api_key, max_file_size_mb=args.max_file_size_mb)
    return asyncio.run(run_conversion(args, config, display))


def handle_config_command(args: argparse.Namespace, display: ConversionDisplay) -> int:
    """Handle configuration management commands."""
    manager = ConfigurationManager()

    if args.config_action == "show":
        config = load_config(manager)
        display.configuration(
            {
                "API Key": config.masked_api_key(),
                "Mode": "live" if config.has_credential else "demo",
                "Max File Size": f"{config.max_file_size_mb} MB",
                "Model": config.model,
                "Max Tokens": config.max_tokens,
                "API URL": config.api_url,
                "API Timeout": f"{config.timeout} seconds",
                "Max Retries": config.max_retries,
                "Config File": manager.config_file,
                "Log File": XDGPaths.get_log_file_path(),
            }
        )
    elif args.config_action == "set":
        manager.set(args.key, args.value)
        shown = "***hidden***" if args.key == "api_key" else args.value
        display.console.print(f"{args.key} set to: {shown}")
    elif args.config_action == "unset":
        manager.unset(args.key)
        display.console.print(f"{args.key} reset to default")
    else:
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="img2latex",
        description="Convert images of equations, diagrams and tables to LaTeX for Overleaf",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=DEFAULT_LOG_LEVEL,
        help="Log file verbosity",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert subcommand
    convert_parser = subparsers.add_parser("convert", help="Convert an image to LaTeX")
    convert_parser.add_argument("image", help="Image file (PNG, JPG, JPEG, GIF, WebP)")
    instructions_group = convert_parser.add_mutually_exclusive_group()
    instructions_group.add_argument(
        "--instructions",
        "-i",
        help="Special instructions: symbol meanings, what to include, preferred packages",
    )
    instructions_group.add_argument(
        "--instructions-file", help="Read special instructions from a file"
    )
    convert_parser.add_argument("--output", "-o", help="Write the LaTeX to this file")
    convert_parser.add_argument(
        "--copy", action="store_true", help="Copy the LaTeX to the clipboard"
    )
    convert_parser.add_argument("--api-key", help="Anthropic API key (overrides configuration)")
    convert_parser.add_argument(
        "--max-file-size-mb", type=int, help="Upload ceiling in megabytes"
    )

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_subparsers = config_parser.add_subparsers(
        dest="config_action", help="Configuration actions"
    )
    config_subparsers.add_parser("show", help="Show effective configuration")
    config_set_parser = config_subparsers.add_parser("set", help="Set a configuration value")
    config_set_parser.add_argument("key", choices=CONFIGURABLE_KEYS, help="Configuration key")
    config_set_parser.add_argument("value", help="Configuration value")
    config_unset_parser = config_subparsers.add_parser(
        "unset", help="Remove a stored configuration value"
    )
    config_unset_parser.add_argument("key", choices=CONFIGURABLE_KEYS, help="Configuration key")

    return parser


def main(argv: Optional[List[str]] = None, display: Optional[ConversionDisplay] = None) -> int:
    """Main entry point for the img2latex command-line interface.

    Environment Variables:
        ANTHROPIC_API_KEY: API key; demo mode is used when absent
        IMG2LATEX_MAX_FILE_SIZE_MB: Upload ceiling in megabytes
        XDG_CONFIG_HOME / XDG_STATE_HOME: Optional directory overrides

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(XDGPaths.get_state_dir(), level=args.log_level)
    logger = get_logger("cli")
    display = display or ConversionDisplay()

    if not args.command:
        parser.print_help()
        return 1

    start_time = time.time()
    logger.info("Started img2latex CLI", command=args.command, version=__version__)

    try:
        if args.command == "convert":
            status = handle_convert_command(args, display)
        else:
            status = handle_config_command(args, display)
    except Img2LatexError as e:
        logger.error("CLI command failed", command=args.command, error=str(e))
        display.error(e.message)
        return 1
    except OSError as e:
        logger.error("CLI command failed", command=args.command, error=str(e))
        display.error(str(e))
        return 1

    logger.info(
        "CLI command finished",
        command=args.command,
        exit_status=status,
        duration_seconds=round(time.time() - start_time, 3),
    )
    return status


if __name__ == "__main__":
    sys.exit(main())
