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

"""Configuration file discovery.

Decides which single file a load call reads. An explicit path always wins
and is returned without looking at the filesystem. Otherwise the first
existing candidate, in this order, is used:

1. ./config.json (current working directory)
2. ~/.config/<identity>/config.json
3. /etc/<identity>/config.json

A candidate that cannot be stat'ed, for example because its directory is
not readable, counts as absent. If none exists, discovery fails with "no
configuration file" and the first candidate is reported as the path.

The working directory, home directory and system directory are parameters
(cwd and home as zero-argument providers) so discovery can be exercised
without touching the real home or /etc.

Example:
    Resolve against a fake home directory:
        ```python
        from pathlib import Path
        from seedconf.discovery import resolve_path

        path = resolve_path("myapp", home=lambda: Path("/tmp/home"))
        ```
"""

from __future__ import annotations

from collections.abc import Callable
import os
from pathlib import Path

from seedconf.exceptions import NO_CONFIGURATION_FILE, LoadFailure
from seedconf.logging import Logger, get_global_logger

__all__ = [
    "CONFIG_FILE_NAME",
    "SYSTEM_CONFIG_DIR",
    "DiscoveryFailure",
    "candidate_paths",
    "expand_user",
    "resolve_path",
]

CONFIG_FILE_NAME = "config.json"
SYSTEM_CONFIG_DIR = Path("/etc")

PathProvider = Callable[[], Path]


def _is_present(candidate: Path) -> bool:
    # an unreadable parent directory hides the candidate like a missing one
    try:
        candidate.stat()
    except OSError:
        return False
    return True


class DiscoveryFailure(LoadFailure):
    """No candidate exists. Carries the path reported to the caller."""

    def __init__(self, reported_path: str) -> None:
        super().__init__(NO_CONFIGURATION_FILE)
        self.reported_path = reported_path


def expand_user(path: str, home: PathProvider | None = None) -> str:
    """Replace a leading ``~`` with the home directory.

    Only ``~`` alone or followed by a path separator is expanded; ``~user``
    forms are returned unchanged.
    """
    if home is None:
        home = Path.home
    if path == "~":
        return str(home())
    seps = (os.sep, os.altsep) if os.altsep else (os.sep,)
    if path.startswith("~") and path[1:2] in seps:
        return str(home() / path[2:])
    return path


def candidate_paths(
    identity: str,
    *,
    cwd: PathProvider | None = None,
    home: PathProvider | None = None,
    system_dir: Path | None = None,
) -> list[Path]:
    """Return the discovery candidates in priority order."""
    if cwd is None:
        cwd = Path.cwd
    if home is None:
        home = Path.home
    if system_dir is None:
        system_dir = SYSTEM_CONFIG_DIR

    return [
        cwd() / CONFIG_FILE_NAME,
        home() / ".config" / identity / CONFIG_FILE_NAME,
        Path(system_dir) / identity / CONFIG_FILE_NAME,
    ]


def resolve_path(
    identity: str | None,
    file_path: str | None = None,
    *,
    cwd: PathProvider | None = None,
    home: PathProvider | None = None,
    system_dir: Path | None = None,
    logger: Logger | None = None,
) -> str:
    """Determine the configuration file to load.

    Args:
        identity: Application token used to build the candidate paths.
            Unused when file_path is given.
        file_path: Explicit override, tilde-expanded and returned as-is.
        cwd: Provider for the working directory. Default Path.cwd.
        home: Provider for the home directory. Default Path.home.
        system_dir: Directory holding system-wide configuration.
            Default /etc.
        logger: Optional logger; falls back to the global logger.

    Returns:
        The path to read, as a string.

    Raises:
        DiscoveryFailure: If no explicit path is given and no candidate
            exists.
    """
    if logger is None:
        logger = get_global_logger()

    if file_path is not None:
        resolved = expand_user(file_path, home)
        logger.verbose("DISCOVERY", f"Using explicit file: {resolved}")
        return resolved

    if identity is None:
        raise ValueError("identity is required when file_path is not given")

    candidates = candidate_paths(identity, cwd=cwd, home=home, system_dir=system_dir)
    for candidate in candidates:
        if _is_present(candidate):
            logger.verbose("DISCOVERY", f"Found configuration file: {candidate}")
            return str(candidate)
        logger.debug("DISCOVERY", f"Not found: {candidate}")

    raise DiscoveryFailure(str(candidates[0]))
