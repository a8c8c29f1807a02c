from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_APP_NAME = "عالم الضيافة"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Display
    app_name: str

    # Persistence; None means <project>/data/db.json
    data_file: Path | None

    # Debug
    debug_log_requests: bool
    log_level: str


def get_settings() -> Settings:
    app_name = os.getenv("APP_NAME", "").strip() or DEFAULT_APP_NAME

    raw_data_file = os.getenv("DATA_FILE", "").strip()
    data_file = Path(raw_data_file).expanduser() if raw_data_file else None

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)
    log_level = (os.getenv("LOG_LEVEL", "INFO").strip() or "INFO").upper()

    return Settings(
        app_name=app_name,
        data_file=data_file,
        debug_log_requests=debug_log_requests,
        log_level=log_level,
    )
