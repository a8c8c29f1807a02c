from __future__ import annotations

import importlib
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect the data directory to a temp dir so tests never touch the real ./data.
    Templates and static files still come from the repository.
    """
    import persistence.paths as paths

    def _data_dir() -> Path:
        return tmp_path / "data"

    monkeypatch.delenv("DATA_FILE", raising=False)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    return tmp_path


@pytest.fixture
def reload_endpoints(sandbox_project: Path) -> None:
    """
    Endpoints create the repository singleton at import time; reload after sandboxing paths.
    """
    import endpoints.site_endpoints as site_endpoints
    import endpoints.admin_endpoints as admin_endpoints

    importlib.reload(site_endpoints)
    importlib.reload(admin_endpoints)


@pytest.fixture
def client(reload_endpoints):
    from fastapi.testclient import TestClient

    import app as app_module

    return TestClient(app_module.create_app())


@pytest.fixture
def memory_repo():
    from persistence.booking_state import DocumentBookingStateRepository, seed_document
    from persistence.memory_store import InMemoryDocumentStore

    return DocumentBookingStateRepository(InMemoryDocumentStore(seed_document()))
