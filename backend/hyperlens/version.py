"""
PURPOSE: Version metadata of the HyperLens API, read from the version.json
file shipped inside the package.
"""

import functools
import json
from pathlib import Path
from typing import Any, Dict

VERSION_FILE = Path(__file__).parent / "version.json"
UNKNOWN_VERSION = "unknown"


@functools.lru_cache(maxsize=1)
def get_version() -> Dict[str, Any]:
    """
    PURPOSE: Load version.json once per process.

    Returns:
        Dict[str, Any]: version, codename and updated_at.

    Raises:
        FileNotFoundError: If version.json is missing from the package.
        json.JSONDecodeError: If version.json is invalid JSON.
    """
    return json.loads(VERSION_FILE.read_text(encoding="utf-8"))


def version_string() -> str:
    """Version number, or "unknown" when version.json cannot be read."""
    try:
        return str(get_version().get("version", UNKNOWN_VERSION))
    except (OSError, ValueError):
        return UNKNOWN_VERSION
