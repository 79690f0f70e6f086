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

"""
Configuration loading for seedconf.

This module runs the load pipeline, turning "a file on disk" into "a
validated configuration object" in one call.

Pipeline
--------
1. **Options**: validate the option bag and fill in option defaults.
2. **Discovery**: pick the file (explicit path, else ./config.json,
   ~/.config/<identity>/config.json, /etc/<identity>/config.json).
3. **Read**: reject non-regular files and files whose permission bits exceed
   the ceiling, then read UTF-8 text.
4. **Parse**: JSON with comments, via the standard json parser.
5. **Validate**: JSON Schema in strict mode, via jsonschema.
6. **Defaults**: write path-addressed defaults where nothing is present.

Defaults are applied after validation and are not validated themselves.

Error Handling
--------------
Each stage raises LoadFailure. `load` is the only place that catches it; it
attaches the path known at that point (None for option failures, the first
discovery candidate for "no configuration file", the resolved path after
that) and raises LoadingError. Exceptions that are not LoadFailure are not
loading errors and propagate unchanged.

Examples
--------
Discovery by identity:

    >>> from seedconf import load
    >>> config = load(identity="myapp")

Explicit file, schema and defaults:

    >>> config = load(
    ...     file_path="~/myapp.json",
    ...     schema={"type": "object", "required": ["name"]},
    ...     default_values={"address.city": "Ha Noi"},
    ...     file_permission=0o644,
    ... )

The same options as a mapping:

    >>> config = load({"identity": "myapp", "file_permission": 0o640})
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from seedconf.defaults import apply_defaults
from seedconf.discovery import DiscoveryFailure, PathProvider, resolve_path
from seedconf.exceptions import LoadFailure, LoadingError
from seedconf.logging import Logger, get_global_logger
from seedconf.options import LoadOptions, normalize_options
from seedconf.parser import parse
from seedconf.reader import format_octal, read_text
from seedconf.schema import validate

__all__ = ["load"]


def _run_stages(file_path: str, options: LoadOptions, logger: Logger) -> Any:
    logger.verbose(
        "LOAD",
        f"Loading {file_path} (permission ceiling {format_octal(options.file_permission)})",
    )
    text = read_text(file_path, options.file_permission, logger=logger)
    config = parse(text, logger=logger)
    validate(config, options.schema, logger=logger)
    apply_defaults(config, options.default_values, logger=logger)
    return config


def load(
    options: Mapping[str, Any] | None = None,
    *,
    cwd: PathProvider | None = None,
    home: PathProvider | None = None,
    system_dir: Path | None = None,
    logger: Logger | None = None,
    **kwargs: Any,
) -> Any:
    """Load, validate and complete a configuration file.

    Options may be given as a mapping, as keyword arguments, or both
    (keywords win). Recognized options: identity, file_path, schema,
    default_values, file_permission; see `seedconf.options`.

    Args:
        options: Option bag as a mapping.
        cwd: Working-directory provider used by discovery. Default Path.cwd.
        home: Home-directory provider used by discovery and "~" expansion.
            Default Path.home.
        system_dir: System configuration directory. Default /etc.
        logger: Optional logger; falls back to the global logger.
        **kwargs: Options as keyword arguments.

    Returns:
        The parsed, validated configuration with defaults applied.

    Raises:
        LoadingError: With a `message` from the fixed vocabulary in
            `seedconf.exceptions`, the file path when known, and labels.
    """
    if logger is None:
        logger = get_global_logger()

    raw: dict[str, Any] = dict(options or {})
    raw.update(kwargs)

    file_path: str | None = None
    try:
        normalized = normalize_options(raw)
        logger.debug("OPTIONS", f"Options accepted: {sorted(raw)}")
        file_path = resolve_path(
            normalized.identity,
            normalized.file_path,
            cwd=cwd,
            home=home,
            system_dir=system_dir,
            logger=logger,
        )
        config = _run_stages(file_path, normalized, logger)
    except LoadFailure as err:
        if isinstance(err, DiscoveryFailure):
            file_path = err.reported_path
        raise LoadingError(err.message, file_path, err.labels) from err

    logger.verbose("LOAD", f"Loaded {file_path}")
    return config
