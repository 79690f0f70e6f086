# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for seedconf.

A thin wrapper around `seedconf.load()` for checking configuration files
from a shell or CI job.

Commands:

    check: Load a configuration file and print the result

Example:
    Check a discovered file against a schema:
        ```bash
        $ seedconf check --identity myapp --schema schema.yaml
        ```

    Check an explicit file with defaults and a looser permission ceiling:
        ```bash
        $ seedconf check --file ./config.json --defaults defaults.json --permission 644
        ```

Exit Codes:

- 0: Configuration loaded
- 1: Loading error (message, path and labels are printed)
- 2: Invalid command-line input (unreadable schema or defaults file)

Note:
    Schema and defaults files may be JSON or YAML; they are read with
    PyYAML's safe_load. The configuration file itself is always JSON with
    comments.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any

import yaml

from seedconf import __version__
from seedconf.exceptions import LoadingError
from seedconf.loader import load
from seedconf.logging import get_logger, set_global_logger


def _octal(text: str) -> int:
    """argparse type for permission values such as 600 or 0o600."""
    digits = text[2:] if text.lower().startswith("0o") else text
    try:
        return int(digits, 8)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"not an octal permission: {text}") from err


def _usage_error(message: str) -> SystemExit:
    print(f"Error: {message}", file=sys.stderr)
    return SystemExit(2)


def _read_mapping(path: Path, what: str) -> dict[str, Any]:
    """Read a JSON or YAML file that must hold a mapping."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as err:
        raise _usage_error(f"cannot read {what} file: {path}: {err}") from err
    except yaml.YAMLError as err:
        raise _usage_error(f"cannot parse {what} file: {path}: {err}") from err
    if not isinstance(data, dict):
        raise _usage_error(f"{what} file must contain a mapping: {path}")
    return data


def _print_error(err: LoadingError) -> None:
    print(f"Error: {err.message}")
    if err.file_path is not None:
        print(f"File:  {err.file_path}")
    for key, value in err.labels.items():
        if not isinstance(value, str):
            value = json.dumps(value)
        print(f"  {key}: {value}")


def cmd_check(args: argparse.Namespace) -> int:
    """Handler for 'seedconf check' command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for a loaded configuration, 1 for a loading error).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    options: dict[str, Any] = {}
    if args.identity is not None:
        options["identity"] = args.identity
    if args.file is not None:
        options["file_path"] = args.file
    if args.schema is not None:
        options["schema"] = _read_mapping(args.schema, "schema")
    if args.defaults is not None:
        options["default_values"] = _read_mapping(args.defaults, "defaults")
    if args.permission is not None:
        options["file_permission"] = args.permission

    try:
        config = load(options)
    except LoadingError as err:
        _print_error(err)
        if args.debug:
            import traceback

            traceback.print_exc()
        return 1

    print(json.dumps(config, indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seedconf",
        description="seedconf - load, validate and complete JSON configuration files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"seedconf {__version__}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    parser_check = subparsers.add_parser(
        "check",
        help="Load a configuration file and print the result",
        description="Discover or open a configuration file, validate it and print it as JSON.",
    )
    parser_check.add_argument(
        "--identity",
        default=None,
        help="Application identity used for discovery (e.g. myapp)",
    )
    parser_check.add_argument(
        "--file",
        default=None,
        help="Explicit configuration file (skips discovery)",
    )
    parser_check.add_argument(
        "--schema",
        type=Path,
        default=None,
        help="JSON Schema file (JSON or YAML)",
    )
    parser_check.add_argument(
        "--defaults",
        type=Path,
        default=None,
        help="File mapping paths to default values (JSON or YAML)",
    )
    parser_check.add_argument(
        "--permission",
        type=_octal,
        default=None,
        help="Permission ceiling in octal (default: 600)",
    )
    parser_check.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show pipeline progress",
    )
    parser_check.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the seedconf CLI.

    Registered as the 'seedconf' console script in pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
