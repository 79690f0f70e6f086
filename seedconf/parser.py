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

"""Comment-tolerant JSON parsing.

Configuration files are JSON plus ``//`` line comments and ``/* */`` block
comments. Nothing else is relaxed: unquoted keys, single-quoted strings,
trailing commas and the ``NaN``/``Infinity`` constants are all rejected.

Comments are blanked out (replaced by spaces, newlines kept) before the
text goes to the standard json parser, so the line and column of a syntax
error still point into the original file. Comment markers inside string
literals are left alone.

Whatever goes wrong, the caller sees one message, "invalid JSON format".
When the parser names a position it is passed on as 0-based
``line``/``column`` labels; otherwise no labels are attached.

Empty or whitespace-only content is invalid. It does not mean ``{}``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from seedconf.exceptions import INVALID_JSON_FORMAT, LoadFailure
from seedconf.logging import Logger, get_global_logger

__all__ = ["parse", "strip_comments"]

# Strings first, so "//" or "/*" inside a string literal is never a comment
_TOKEN_RX = re.compile(
    r"""
    (?P<string>"(?:\\.|[^"\\])*")
  | (?P<line>//[^\n]*)
  | (?P<block>/\*[\s\S]*?\*/)
    """,
    re.VERBOSE,
)


def _blank(match: re.Match[str]) -> str:
    if match.lastgroup == "string":
        return match.group()
    return re.sub(r"[^\n]", " ", match.group())


def strip_comments(text: str) -> str:
    """Replace comments with whitespace of the same shape."""
    return _TOKEN_RX.sub(_blank, text)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse(text: str, logger: Logger | None = None) -> Any:
    """Parse JSON-with-comments text.

    Args:
        text: File content.
        logger: Optional logger; falls back to the global logger.

    Returns:
        Parsed value built from dicts, lists and scalars.

    Raises:
        LoadFailure: "invalid JSON format", with line/column labels when the
            parser reported them.
    """
    if logger is None:
        logger = get_global_logger()

    if not text.strip():
        raise LoadFailure(INVALID_JSON_FORMAT)

    try:
        value = json.loads(strip_comments(text), parse_constant=_reject_constant)
    except json.JSONDecodeError as err:
        logger.debug("PARSE", f"Parser rejected content: {err}")
        raise LoadFailure(
            INVALID_JSON_FORMAT, {"line": err.lineno - 1, "column": err.colno - 1}
        ) from err
    except ValueError as err:
        logger.debug("PARSE", f"Parser rejected content: {err}")
        raise LoadFailure(INVALID_JSON_FORMAT) from err

    logger.verbose("PARSE", f"Parsed {type(value).__name__} value")
    return value
