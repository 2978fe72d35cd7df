import pytest

from rely import config
from rely.db.db import close_conn, get_conn, init_db


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point storage at a temp dir and give the gateway a dummy key."""
    monkeypatch.setattr(config, "STORAGE_DIR", tmp_path)
    monkeypatch.setattr(config, "UPLOADS_DIR", tmp_path / "uploads")
    monkeypatch.setattr(config, "EXPORTS_DIR", tmp_path / "outputs" / "exports")
    monkeypatch.setattr(config, "RELY_PUBLIC_BASE_URL", "")
    monkeypatch.setattr(config, "RELY_API_KEY", "test-key")
    monkeypatch.setattr(config, "RELY_ANALYSIS_MODE", "ai")
    monkeypatch.setattr(config, "RELY_HEURISTIC_FALLBACK", False)
    monkeypatch.setattr(config, "RELY_MAX_RETRIES", 3)
    return tmp_path


@pytest.fixture
def conn(tmp_path):
    db_path = tmp_path / "rely_test.db"
    init_db(db_path, config.SCHEMA_PATH)
    yield get_conn(db_path)
    close_conn(db_path)
