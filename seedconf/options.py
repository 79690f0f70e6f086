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

"""Option bag validation for `seedconf.load()`.

Recognized options:

- identity: application token used for discovery, ``^[a-zA-Z0-9._]+$``.
  Required only when no file_path is given.
- file_path: explicit configuration file, highest priority.
- schema: JSON Schema as a dict. Default ``{}`` (accept anything).
- default_values: mapping of path expression to fallback value.
  Default ``{}``.
- file_permission: upper bound for the file's permission bits, an int in
  ``0..0o7777``. Default ``0o600``.

Any other key is rejected with "unknown option: <name>".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
import re
from typing import Any

from jsonpath_ng.exceptions import JSONPathError

from seedconf.defaults import compile_path
from seedconf.exceptions import LoadFailure

__all__ = [
    "DEFAULT_FILE_PERMISSION",
    "MAX_FILE_PERMISSION",
    "OPTION_NAMES",
    "LoadOptions",
    "normalize_options",
]

DEFAULT_FILE_PERMISSION = 0o600
MAX_FILE_PERMISSION = 0o7777

OPTION_NAMES = (
    "identity",
    "file_path",
    "schema",
    "default_values",
    "file_permission",
)

_IDENTITY_RX = re.compile(r"[a-zA-Z0-9._]+")


@dataclass(frozen=True)
class LoadOptions:
    """Validated options for a single load call."""

    identity: str | None = None
    file_path: str | None = None
    schema: dict[str, Any] = field(default_factory=dict)
    default_values: dict[str, Any] = field(default_factory=dict)
    file_permission: int = DEFAULT_FILE_PERMISSION


def _check_file_path(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, os.PathLike):
        raw = os.fspath(raw)
    # the OS refuses paths with NUL bytes
    if not isinstance(raw, str) or not raw or "\x00" in raw:
        raise LoadFailure.invalid_option("file_path")
    return raw


def _check_identity(raw: Any, required: bool) -> str | None:
    if raw is None and not required:
        return None
    if not isinstance(raw, str) or not _IDENTITY_RX.fullmatch(raw):
        raise LoadFailure.invalid_option("identity")
    return raw


def _check_schema(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise LoadFailure.invalid_option("schema")
    return raw


def _check_file_permission(raw: Any) -> int:
    if raw is None:
        return DEFAULT_FILE_PERMISSION
    # bool is an int subclass; True is not a permission
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise LoadFailure.invalid_option("file_permission")
    if raw < 0 or raw > MAX_FILE_PERMISSION:
        raise LoadFailure.invalid_option("file_permission")
    return raw


def _check_default_values(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise LoadFailure.invalid_option("default_values")
    for path in raw:
        if not isinstance(path, str):
            raise LoadFailure.invalid_option("default_values")
        try:
            compile_path(path)
        except JSONPathError as err:
            raise LoadFailure.invalid_option("default_values") from err
    return raw


def normalize_options(raw: Mapping[str, Any] | None) -> LoadOptions:
    """Validate a raw option bag and fill in defaults.

    Args:
        raw: Caller-supplied options. None is treated as empty.

    Returns:
        Fully populated LoadOptions.

    Raises:
        LoadFailure: "unknown option: <name>" for the first unrecognized key,
            or "invalid option: <name>" for a value of the wrong shape.
    """
    raw = dict(raw or {})

    for name in raw:
        if name not in OPTION_NAMES:
            raise LoadFailure.unknown_option(str(name))

    file_path = _check_file_path(raw.get("file_path"))
    identity = _check_identity(raw.get("identity"), required=file_path is None)
    schema = _check_schema(raw.get("schema"))
    file_permission = _check_file_permission(raw.get("file_permission"))
    default_values = _check_default_values(raw.get("default_values"))

    return LoadOptions(
        identity=identity,
        file_path=file_path,
        schema=schema,
        default_values=default_values,
        file_permission=file_permission,
    )
