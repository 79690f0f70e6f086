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

"""Error types for seedconf.

Every failure a caller can observe from `load()` is a single exception type,
LoadingError. Which failure happened is carried by its `message` attribute
(one of a fixed set of short strings) plus a `labels` dict with extra
diagnostics. There is no subclass per failure kind.

Internally each pipeline stage raises LoadFailure, which has no file path.
The loader catches LoadFailure at exactly one place, attaches the path it
knows at that point and re-raises it as LoadingError. Any other exception is
not a loading error and propagates untouched.

Example:
    Reacting to a specific failure:
        ```python
        from seedconf import LoadingError, load
        from seedconf.exceptions import FILE_PERMISSION_TOO_OPEN

        try:
            config = load(identity="myapp")
        except LoadingError as err:
            if err.message == FILE_PERMISSION_TOO_OPEN:
                print(f"chmod {err.labels['upperBoundary'][2:]} {err.file_path}")
            raise
        ```
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "LoadingError",
    "LoadFailure",
    "UNKNOWN_OPTION",
    "INVALID_OPTION",
    "NO_CONFIGURATION_FILE",
    "FILE_NOT_ACCESSIBLE",
    "NOT_A_REGULAR_FILE",
    "FILE_PERMISSION_TOO_OPEN",
    "INVALID_JSON_FORMAT",
    "BAD_SCHEMA",
    "BAD_ATTRIBUTE",
]

# Message vocabulary. UNKNOWN_OPTION and INVALID_OPTION are prefixes that
# are completed with the option name.
UNKNOWN_OPTION = "unknown option"
INVALID_OPTION = "invalid option"
NO_CONFIGURATION_FILE = "no configuration file"
FILE_NOT_ACCESSIBLE = "file is not existed or access denied"
NOT_A_REGULAR_FILE = "not a regular file"
FILE_PERMISSION_TOO_OPEN = "file permission is too open"
INVALID_JSON_FORMAT = "invalid JSON format"
BAD_SCHEMA = "bad schema"
BAD_ATTRIBUTE = "bad attribute"


class LoadFailure(Exception):
    """Internal failure raised by a pipeline stage.

    Never leaves `seedconf.load()`; the loader converts it to LoadingError.

    Attributes:
        message: Message from the fixed vocabulary.
        labels: Extra diagnostics, shape depends on message.
    """

    def __init__(self, message: str, labels: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.labels: dict[str, Any] = dict(labels or {})

    @classmethod
    def unknown_option(cls, name: str) -> LoadFailure:
        return cls(f"{UNKNOWN_OPTION}: {name}")

    @classmethod
    def invalid_option(cls, name: str) -> LoadFailure:
        return cls(f"{INVALID_OPTION}: {name}")


class LoadingError(Exception):
    """Raised by `seedconf.load()` for every reportable loading failure.

    Attributes:
        message: Short stable string, e.g. "bad attribute" or
            "invalid option: schema".
        file_path: Path being processed when the failure happened, or None
            if it happened before a path was known.
        labels: Extra diagnostics. For example "file permission is too open"
            carries {"upperBoundary": "0o600", "actual": "0o644"}.
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        labels: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.labels: dict[str, Any] = dict(labels or {})
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.file_path is None:
            return self.message
        return f"{self.message}: {self.file_path}"

    def __repr__(self) -> str:
        return (
            f"LoadingError(message={self.message!r}, "
            f"file_path={self.file_path!r}, labels={self.labels!r})"
        )
