"""
Command-line interface for auto-adjust style files.

Examples:
    auto-adjust inspect my_style.json
    auto-adjust validate my_style.yaml
    auto-adjust convert my_style.json my_style.yaml
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from auto_adjust.config import get_global_config
from auto_adjust.errors import VersionMismatchError
from auto_adjust.logging_config import log_style_summary, setup_logger
from auto_adjust.style import read_style, write_style

logger = logging.getLogger(__name__)


def cmd_inspect(args) -> int:
    """Print a summary of a style file."""
    style = read_style(args.style)
    log_style_summary(logging.getLogger("auto_adjust.cli"), style)
    return 0


def cmd_validate(args) -> int:
    """Check that a style file can be loaded."""
    try:
        style = read_style(args.style)
    except (VersionMismatchError, ValueError) as e:
        logger.error(f"[FAIL] {args.style}: {e}")
        return 1
    logger.info(f"[OK] {args.style}: version {style.version}, {len(style.rules)} rules")
    return 0


def cmd_convert(args) -> int:
    """Re-encode a style file (format picked from the destination suffix)."""
    style = read_style(args.source)
    write_style(style, args.destination)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='auto-adjust',
        description='Inspect, validate and convert auto-adjust style files'
    )
    parser.add_argument('--log-level', default=None, help='Logging level (default: logging.level from config)')
    parser.add_argument('--log-file', type=Path, default=None, help='Also write logs to this file')

    subparsers = parser.add_subparsers(dest='command', required=True)

    inspect_parser = subparsers.add_parser('inspect', help='Show style rules')
    inspect_parser.add_argument('style', type=Path, help='Style file (.json, .yaml, .yml)')
    inspect_parser.set_defaults(func=cmd_inspect)

    validate_parser = subparsers.add_parser('validate', help='Check format and version')
    validate_parser.add_argument('style', type=Path, help='Style file (.json, .yaml, .yml)')
    validate_parser.set_defaults(func=cmd_validate)

    convert_parser = subparsers.add_parser('convert', help='Convert between JSON and YAML')
    convert_parser.add_argument('source', type=Path, help='Input style file')
    convert_parser.add_argument('destination', type=Path, help='Output style file')
    convert_parser.set_defaults(func=cmd_convert)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_global_config()
    log_file = args.log_file
    if log_file is None and config.get_bool('logging.log_to_file'):
        log_file = config.get_path('log_dir', 'logs/') / 'auto_adjust.log'
    setup_logger(
        "auto_adjust",
        log_file=log_file,
        level=args.log_level or config.get('logging.level', 'INFO'),
        console=config.get_bool('logging.log_to_console', True)
    )

    try:
        return args.func(args)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 2
    except (VersionMismatchError, ValueError) as e:
        logger.error(f"Invalid style: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
