from __future__ import annotations

import os

# db.py reads this at import time
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from aeroclub.config import DEFAULT_POLICY, get_policy
from aeroclub.db import get_db, init_db
from aeroclub.engine import Mission
from aeroclub.main import build_app


def dt(value: str) -> datetime:
    return datetime.fromisoformat(value)


@pytest.fixture()
def mission_a() -> Mission:
    # take-off 10:00, back 18:00 -> holds the aircraft 07:00-21:00
    return Mission(
        id=1,
        resource_id=1,
        scheduled_start=dt("2025-01-01T07:00"),
        scheduled_end=dt("2025-01-01T21:00"),
        total_usage_hours=8.0,
        origin="SBMT",
        destination="SBRJ",
    )


@pytest.fixture()
def client() -> Iterator[TestClient]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    init_db(bind=engine)
    TestingSession = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )

    def _db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app = build_app()
    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_policy] = lambda: DEFAULT_POLICY
    with TestClient(app) as c:
        yield c
    engine.dispose()


@pytest.fixture()
def aircraft_id(client: TestClient) -> int:
    res = client.post("/aircraft", json={"registration": "pr-abc", "model": "C172"})
    assert res.status_code == 201
    return res.json()["id"]
