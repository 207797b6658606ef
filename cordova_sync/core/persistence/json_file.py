"""
JSON file persistence — atomic read/write for package.json and fetch.json.

Writes are atomic (write to temp file, then rename) so a crash mid-write
never leaves a truncated manifest behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from cordova_sync.core.errors import ConfigError, PersistenceError

logger = logging.getLogger(__name__)


def read_json(path: Path, default: Any = None) -> Any:
    """Load a JSON document.

    Args:
        path: File to read.
        default: Returned when the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    if not path.is_file():
        return default

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def write_json_atomic(path: Path, data: Any, indent: int = 2) -> None:
    """Write *data* as JSON (atomic write).

    Raises:
        PersistenceError: If the file cannot be written.
    """
    content = json.dumps(data, indent=indent, ensure_ascii=False) + "\n"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}_",
            suffix=".tmp",
        )
        tmp = Path(tmp_path)
        try:
            with open(_fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp.replace(path)
            logger.debug("Wrote %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.error("Failed to write %s: %s", path, e)
        raise PersistenceError(f"Cannot write {path}: {e}") from e
