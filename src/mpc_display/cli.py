"""
mpc-display - command-line entry point

Displays the current state of an MPD server and controls it from the keyboard.
"""

import argparse
import sys
from typing import List, Optional

from mpc_display import __version__
from mpc_display.core.config import Config, ConfigError, load_config, parse_format


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpc-display",
        description="Displays the current state of an MPD server.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Connection
    parser.add_argument("-H", "--host", help="Connect to server at address HOST")
    parser.add_argument("-P", "--port", type=int, help="Connect to server on port PORT")

    # Display
    parser.add_argument(
        "-f",
        "--format",
        help="Comma-separated list of song metadata to display (default: title,artist,album)",
    )
    parser.add_argument(
        "-t", "--title", action="store_true", help="Equivalent to '--format title'"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every tag, even when it is the same for the whole queue",
    )
    parser.add_argument(
        "-r", "--ratings", action="store_true", help="Show the 'rating' sticker of the current song"
    )
    parser.add_argument(
        "-p", "--progress", action="store_true", help="Show a progress bar for the current song"
    )
    parser.add_argument(
        "-g", "--grades", action="store_true", help="Show the rating as a letter grade"
    )

    # Ambient
    parser.add_argument("--config", help="Path to config.toml")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    return parser


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Command-line flags take precedence over environment and config file."""
    if args.host:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port

    if args.title:
        config.display.format = ["title"]
    elif args.format:
        config.display.format = parse_format(args.format)

    config.display.verbose = config.display.verbose or args.verbose
    config.display.ratings = config.display.ratings or args.ratings
    config.display.progress = config.display.progress or args.progress
    config.display.grades = config.display.grades or args.grades

    if args.log_level:
        config.logging.level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the mpc-display command."""
    args = build_parser().parse_args(argv)

    try:
        config = apply_args(load_config(args.config), args)
    except ConfigError as e:
        print(f"mpc-display: {e}", file=sys.stderr)
        sys.exit(2)

    from mpc_display.core.output import setup_from_config

    setup_from_config(config.logging)

    from .main import run

    sys.exit(run(config))


if __name__ == "__main__":
    main()
