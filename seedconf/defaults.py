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

"""Path-addressed default values.

Callers describe fallback values by path rather than through the schema:

    {"age": 18, "address.city": "Ha Noi", "servers[0].port": 8080}

Each path is a JSONPath expression as understood by jsonpath-ng, which
covers the dotted and bracketed forms above. A default is written only when
the path matches nothing in the loaded value. A present value, including an
explicit null, is left alone, so applying the same defaults twice has the
same effect as applying them once.

An index past the end of an existing or newly created list pads the skipped
slots with empty objects, the way jsonpath-ng creates them: ``x[2]`` set to
5 on ``{}`` gives ``{"x": [{}, {}, 5]}``.

A default whose path runs through a scalar, or asks for a field inside a
list, cannot be written and is skipped.

Defaults run after schema validation and are not validated themselves.
"""

from __future__ import annotations

from copy import deepcopy
from functools import lru_cache
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.jsonpath import JSONPath

from seedconf.logging import Logger, get_global_logger

__all__ = ["apply_defaults", "compile_path"]


@lru_cache(maxsize=256)
def compile_path(path: str) -> JSONPath:
    """Compile a default-value path.

    Raises:
        jsonpath_ng.exceptions.JSONPathError: If the path cannot be parsed.
    """
    return jsonpath_parse(path)


def apply_defaults(
    value: Any,
    defaults_by_path: dict[str, Any],
    logger: Logger | None = None,
) -> None:
    """Write each default into `value` where nothing is present yet.

    Intermediate objects are created as needed. Modifies `value` in place.

    Args:
        value: Parsed configuration (usually a dict).
        defaults_by_path: Mapping from path expression to default value.
        logger: Optional logger; falls back to the global logger.
    """
    if logger is None:
        logger = get_global_logger()

    if not isinstance(value, (dict, list)):
        if defaults_by_path:
            logger.verbose(
                "DEFAULTS",
                f"Skipping defaults: configuration root is {type(value).__name__}",
            )
        return

    for path, default in defaults_by_path.items():
        expr = compile_path(path)
        if expr.find(value):
            logger.debug("DEFAULTS", f"{path}: present, kept")
            continue
        try:
            expr.update_or_create(value, deepcopy(default))
        except TypeError:
            # a field path written into a list, or similar shape mismatch
            logger.verbose("DEFAULTS", f"{path}: cannot be created here, skipped")
            continue
        logger.debug("DEFAULTS", f"{path}: absent, set to {default!r}")
