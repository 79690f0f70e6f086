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

"""Pipeline tracing for seedconf.

Each load stage reports what it decided under a fixed prefix:

- OPTIONS: which option keys were accepted
- DISCOVERY: candidates checked and the file picked
- READ: file mode against the permission ceiling, bytes read
- PARSE: parser rejections and the type of the parsed root
- SCHEMA: validator class in use, first rejected instance path
- DEFAULTS: per path, whether a default was written or skipped
- LOAD: start and end of a load call

Verbose messages are the decisions a user checking a config file cares
about; debug messages add per-candidate and per-path detail. Output goes to
stderr, so ``seedconf check -v`` still prints a clean JSON document on
stdout.

Example:
    Trace why a file was picked and which defaults were filled in:
        ```python
        from seedconf import load
        from seedconf.logging import get_logger

        config = load(identity="myapp", logger=get_logger(debug=True))
        ```

    Sample output:
        ```
        [DISCOVERY] Not found: /srv/app/config.json
        [DISCOVERY] Found configuration file: /home/me/.config/myapp/config.json
        [READ] Mode 0o600, ceiling 0o600
        [DEFAULTS] address.city: absent, set to 'Ha Noi'
        ```

Note:
    The global logger is silent until `set_global_logger` is called, so an
    application embedding seedconf prints nothing unless it opts in. The CLI
    configures it from --verbose/--debug.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class Logger(Protocol):
    """What a load stage needs from a logger."""

    def verbose(self, prefix: str, message: str) -> None:
        """Report a stage decision.

        Args:
            prefix: Stage name, e.g. "READ" or "SCHEMA".
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Report stage detail.

        Args:
            prefix: Stage name, e.g. "DISCOVERY" or "DEFAULTS".
            message: Log message.
        """
        ...


class DefaultLogger:
    """Logger that writes ``[PREFIX] message`` lines to a stream."""

    def __init__(
        self,
        verbose: bool = False,
        debug: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self._verbose = verbose or debug
        self._debug = debug
        self._stream = stream

    def _emit(self, prefix: str, message: str) -> None:
        # looked up per call; sys.stderr may be replaced at runtime
        print(f"[{prefix}] {message}", file=self._stream or sys.stderr)

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            self._emit(prefix, message)

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            self._emit(prefix, message)


class SilentLogger:
    """Logger that drops every message."""

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(
    verbose: bool = False, debug: bool = False, stream: TextIO | None = None
) -> Logger:
    """Build a logger for the given verbosity.

    Args:
        verbose: Print stage decisions.
        debug: Also print stage detail (implies verbose).
        stream: Where to write. Default sys.stderr.
    """
    return DefaultLogger(verbose=verbose, debug=debug, stream=stream)


def get_global_logger() -> Logger:
    """Return the logger used by stages called without one."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Replace the logger used by stages called without one."""
    global _global_logger
    _global_logger = logger
