from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from conciliacao_fiscal.db import session as session_module
from conciliacao_fiscal.db.session import get_db_session


class UnreachableSession:
    def execute(self, *args: Any, **kwargs: Any) -> None:
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


def test_health_live_returns_alive(client: TestClient) -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_health_ready_returns_ready(client: TestClient) -> None:
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


def test_health_ready_reports_unavailable_database(client: TestClient) -> None:
    def unreachable() -> Generator[UnreachableSession, None, None]:
        yield UnreachableSession()

    client.app.dependency_overrides[get_db_session] = unreachable

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json() == {"detail": "Banco de dados indisponível"}


def test_postgres_sessions_use_local_timezone(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []

    def fake_create_engine(url: str, **kwargs: Any) -> str:
        calls.append((url, kwargs))
        return "engine"

    monkeypatch.setattr(session_module, "create_engine", fake_create_engine)

    session_module.build_engine(
        "postgresql+psycopg://user:secret@db:5432/fiscal",
        app_timezone="America/Sao_Paulo",
    )
    session_module.build_engine("sqlite://", app_timezone="America/Sao_Paulo")

    assert calls[0][1]["connect_args"] == {"options": "-c timezone=America/Sao_Paulo"}
    assert calls[1][1]["connect_args"] == {}
