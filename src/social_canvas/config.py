"""
Module: config

Purpose:
    JSON option files, so a look can be saved once and reused across
    runs. Keys are ProcessingOptions field names; colours are stored as
    "#rrggbb".

Key Functions:
    - load_options(): Read a JSON file into ProcessingOptions
    - save_options(): Write ProcessingOptions to JSON

Dependencies:
    - json (std)
    - core.models.options: ProcessingOptions

Used By:
    - social_canvas.cli: --config / --save-config
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from social_canvas.core.errors import InvalidOption
from social_canvas.core.models import ProcessingOptions

logger = logging.getLogger(__name__)


def read_options_dict(path: Path) -> Dict[str, Any]:
    """
    Read the raw option mapping from a JSON file.

    Raises:
        InvalidOption: If the file is missing, malformed, or not an object
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise InvalidOption(f"Options file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise InvalidOption(f"Options file is corrupted: {path}: {e}") from e
    except OSError as e:
        raise InvalidOption(f"Failed to read options file {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidOption(f"Options file must contain a JSON object: {path}")
    return data


def load_options(path: Path, overrides: Optional[Dict[str, Any]] = None) -> ProcessingOptions:
    """
    Build ProcessingOptions from a JSON file.

    Args:
        path: JSON file path
        overrides: Values that take precedence over the file

    Raises:
        InvalidOption: On unreadable files, unknown keys or bad values
    """
    data = read_options_dict(path)
    if overrides:
        data.update(overrides)
    options = ProcessingOptions.from_dict(data)
    logger.debug(f"Loaded options from {path}")
    return options


def save_options(options: ProcessingOptions, path: Path) -> Path:
    """
    Write options as pretty-printed JSON; returns the path.

    Raises:
        InvalidOption: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(options.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise InvalidOption(f"Failed to write options file {path}: {e}") from e
    logger.info(f"Saved options to {path}")
    return path
