from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from errors import StorageUnavailable


def read_json_document(path: Path) -> dict[str, Any]:
    """
    Read a JSON object from disk.

    Raises StorageUnavailable for missing, unreadable, empty or invalid files,
    and for JSON whose top level is not an object.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise StorageUnavailable(path, "missing") from e
    except (OSError, UnicodeDecodeError) as e:
        raise StorageUnavailable(path, f"unreadable: {e}") from e
    if not raw.strip():
        raise StorageUnavailable(path, "empty")
    try:
        doc = json.loads(raw)
    except ValueError as e:
        raise StorageUnavailable(path, f"invalid json: {e}") from e
    if not isinstance(doc, dict):
        raise StorageUnavailable(path, "top-level value is not an object")
    return doc


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    Non-ASCII text (the seed data is Arabic) is written as-is.
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        tmp_path.replace(path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise StorageUnavailable(path, f"write failed: {e}") from e
