from datetime import datetime

import pytest

from app.core.config import ScoringConfig, settings
from app.db.database import init_database
from factories import NOW


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def config() -> ScoringConfig:
    return ScoringConfig()


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh sqlite store for one test."""
    db_file = tmp_path / "triage.db"
    monkeypatch.setattr(settings, "db_path", str(db_file))
    monkeypatch.setattr(settings, "frozen_now", NOW)
    init_database()
    return db_file


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
