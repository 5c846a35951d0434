from pathlib import Path
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.db.database import Base, Database
from src.main import create_app
from src.settings.db_settings import Settings

FRONTEND_URL = "http://localhost:5173"


@pytest.fixture
def database(tmp_path: Path) -> Iterator[Database]:
    db = Database(f"sqlite:///{tmp_path / 'products.db'}")
    yield db
    Base.metadata.drop_all(bind=db.engine)
    db.dispose()


@pytest.fixture
def app(database: Database) -> FastAPI:
    return create_app(Settings(FRONTEND_URL=FRONTEND_URL), database=database)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def product(client: TestClient) -> dict:
    res = client.post("/api/products", json={"name": "Monitor Curvo", "price": 300})
    assert res.status_code == 201
    return res.json()["data"]
