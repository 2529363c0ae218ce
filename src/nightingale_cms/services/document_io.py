"""
Reading and writing the single-file JSON data document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from nightingale_cms.core.exceptions import DocumentLoadError
from nightingale_cms.logging import get_logger

log = get_logger(__name__)


def load_document(path: str | Path, *, require_object: bool = True) -> Dict[str, Any]:
    """
    Load a data document; missing files and bad JSON raise DocumentLoadError.

    A top-level value that is not an object also raises, unless
    ``require_object`` is False, in which case it loads as an empty document.
    """
    path = Path(path)
    if not path.exists():
        raise DocumentLoadError(f"File not found: {path.resolve()}")
    if not path.is_file():
        raise DocumentLoadError(f"Not a file: {path.resolve()}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(f"Failed to parse JSON: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentLoadError(f"Failed to read {path}: {exc}") from exc

    if not isinstance(data, dict):
        if not require_object:
            log.warning("%s holds a top-level %s, treating it as empty", path, type(data).__name__)
            return {}
        raise DocumentLoadError(f"Expected a JSON object at top level, got {type(data).__name__}")

    log.debug("Loaded document %s (keys=%s)", path, sorted(data.keys()))
    return data


def write_document(data: Dict[str, Any], path: str | Path, indent: int = 2) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(data, indent=indent, ensure_ascii=False)
    with path.open("w", encoding="utf-8") as f:
        f.write(payload)

    log.info("Wrote document %s (%d bytes)", path, path.stat().st_size)
    return path


__all__ = ["load_document", "write_document"]
