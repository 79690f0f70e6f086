"""
seedconf - validated configuration files in one call

seedconf turns "a file on disk" into "a validated configuration object":

  - Discovers the file (explicit path, ./config.json,
    ~/.config/<identity>/config.json, /etc/<identity>/config.json)
  - Refuses non-regular files and files readable by more users than allowed
  - Parses JSON with comments
  - Validates against a JSON Schema in strict mode
  - Fills in missing optional fields from path-addressed defaults

Every failure surfaces as a single LoadingError with a short, stable message,
the file path and a dict of diagnostic labels.

Quick Start
-----------
    from seedconf import LoadingError, load

    try:
        config = load(
            identity="myapp",
            schema={"type": "object", "required": ["name"]},
            default_values={"address.city": "Ha Noi"},
        )
    except LoadingError as err:
        print(err.message, err.file_path, err.labels)

Check a file from the shell:

    $ seedconf check --file ./config.json --schema schema.json

Package Structure
-----------------
loader : module
    The load pipeline and its single error-wrapping point.
options : module
    Option bag validation.
discovery : module
    Candidate file locations and path resolution.
reader : module
    Regular-file and permission checks, UTF-8 reading.
parser : module
    JSON with comments, strict otherwise.
schema : module
    Strict JSON Schema validation (jsonschema).
defaults : module
    Path-addressed default values (jsonpath-ng).
exceptions : module
    LoadingError and the message vocabulary.
cli : module
    Command-line interface with argparse.

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Load, validate and complete JSON configuration files"

from seedconf.discovery import resolve_path
from seedconf.exceptions import LoadingError
from seedconf.loader import load
from seedconf.options import DEFAULT_FILE_PERMISSION, LoadOptions, normalize_options

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "load",
    "LoadingError",
    "LoadOptions",
    "normalize_options",
    "resolve_path",
    "DEFAULT_FILE_PERMISSION",
]
