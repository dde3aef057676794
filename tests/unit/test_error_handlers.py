from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from conciliacao_fiscal.api.error_handlers import register_error_handlers
from conciliacao_fiscal.domain.errors import InvalidStateError, NotFoundError


class Payload(BaseModel):
    valor: int


def build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError(message="Parcela ausente")

    @app.get("/invalid-state")
    def invalid_state() -> None:
        raise InvalidStateError(
            message="Acordo cancelado",
            details={"acordo_status": "cancelado"},
        )

    @app.post("/payload")
    def payload(body: Payload) -> dict[str, int]:
        return {"valor": body.valor}

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("segredo interno")

    return TestClient(app, raise_server_exceptions=False)


def test_domain_error_handler_returns_contract_shape() -> None:
    response = build_client().get("/not-found")

    assert response.status_code == 404
    assert response.json() == {"error": "Parcela ausente", "code": "NOT_FOUND"}


def test_domain_error_handler_includes_details() -> None:
    response = build_client().get("/invalid-state")

    assert response.status_code == 400
    assert response.json() == {
        "error": "Acordo cancelado",
        "code": "INVALID_STATE",
        "details": {"acordo_status": "cancelado"},
    }


def test_validation_errors_map_to_400() -> None:
    response = build_client().post("/payload", json={"valor": "abc"})

    body = response.json()
    assert response.status_code == 400
    assert body["code"] == "INVALID_REQUEST"
    assert body["details"]["errors"]


def test_unexpected_errors_hide_internal_message() -> None:
    response = build_client().get("/boom")

    body = response.json()
    assert response.status_code == 500
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert "segredo" not in body["error"]
