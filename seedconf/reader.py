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

"""Permission-checked file reading.

Configuration files often hold credentials, so before reading one the
loader checks that it is a regular file and that its permission bits do not
exceed a ceiling (0o600 unless the caller says otherwise).

The comparison is numeric, not a subset test: with a ceiling of 0o700 a file
in mode 0o701 is rejected even though only the other-execute bit differs,
while 0o600 passes.

On platforms without POSIX permission bits the ceiling check is skipped.

Any failure to stat or open the path (missing, access denied, name too
long, symlink loop, ...) is reported as "file is not existed or access
denied".
"""

from __future__ import annotations

import os
import stat

from seedconf.exceptions import (
    FILE_NOT_ACCESSIBLE,
    FILE_PERMISSION_TOO_OPEN,
    INVALID_JSON_FORMAT,
    NOT_A_REGULAR_FILE,
    LoadFailure,
)
from seedconf.logging import Logger, get_global_logger

__all__ = ["format_octal", "read_text"]

def format_octal(mode: int) -> str:
    """Format permission bits as ``0o`` followed by octal digits."""
    return f"0o{mode:o}"


def _has_posix_permissions() -> bool:
    return os.name != "nt"


def read_text(
    path: str,
    permission_ceiling: int,
    logger: Logger | None = None,
) -> str:
    """Check a file and return its content decoded as UTF-8.

    Args:
        path: File to read.
        permission_ceiling: Largest allowed value of ``mode & 0o777``.
        logger: Optional logger; falls back to the global logger.

    Returns:
        The full text content.

    Raises:
        LoadFailure: "file is not existed or access denied",
            "not a regular file", "file permission is too open" (with
            upperBoundary/actual labels), or "invalid JSON format" when the
            content is not UTF-8.
    """
    if logger is None:
        logger = get_global_logger()

    # ValueError is raised for an embedded NUL byte
    try:
        st = os.stat(path)
    except (OSError, ValueError) as err:
        raise LoadFailure(FILE_NOT_ACCESSIBLE) from err

    if not stat.S_ISREG(st.st_mode):
        raise LoadFailure(NOT_A_REGULAR_FILE)

    actual = st.st_mode & 0o777
    if _has_posix_permissions():
        logger.debug(
            "READ",
            f"Mode {format_octal(actual)}, ceiling {format_octal(permission_ceiling)}",
        )
        if actual > permission_ceiling:
            raise LoadFailure(
                FILE_PERMISSION_TOO_OPEN,
                {
                    "upperBoundary": format_octal(permission_ceiling),
                    "actual": format_octal(actual),
                },
            )

    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as err:
        raise LoadFailure(FILE_NOT_ACCESSIBLE) from err

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise LoadFailure(INVALID_JSON_FORMAT) from err

    logger.verbose("READ", f"Read {len(raw)} byte(s) from {path}")
    return text
