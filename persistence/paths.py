from __future__ import annotations

from pathlib import Path

DOCUMENT_FILENAME = "db.json"


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return project_root() / "data"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def document_path(override: Path | None = None) -> Path:
    """Location of the booking document; DATA_FILE wins over data/db.json."""
    if override is not None:
        return override
    return data_dir() / DOCUMENT_FILENAME
