from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.historico import HistoricoProcesso, LogAuditoria
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus


def payment_body(parcela_id: object, valor: str) -> dict[str, str]:
    return {
        "parcelaId": str(parcela_id),
        "valorPago": valor,
        "formaPagamento": "pix",
        "dataPagamento": "2026-02-01",
    }


def test_partial_and_excess_payments_follow_remaining_balance(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(valores=("1000.00", "500.00"))
    primeira, segunda = seeded.parcela_ids

    first = client.post(
        "/v1/pagamentos",
        json=payment_body(primeira, "600.00"),
        headers=funcionario_headers,
    )
    assert first.status_code == 201
    assert first.json()["parcela"]["status"] == "PENDENTE"
    assert first.json()["parcela"]["valorRestante"] == "400.00"
    assert first.json()["pagamento"]["valorPago"] == "600.00"

    second = client.post(
        "/v1/pagamentos",
        json=payment_body(primeira, "400.00"),
        headers=funcionario_headers,
    )
    assert second.status_code == 201
    assert second.json()["parcela"]["status"] == "PAGO"
    assert second.json()["parcela"]["dataPagamento"] == "2026-02-01"
    assert second.json()["acordoCumprido"] is False

    rejected = client.post(
        "/v1/pagamentos",
        json=payment_body(segunda, "500.01"),
        headers=funcionario_headers,
    )
    body = rejected.json()
    assert rejected.status_code == 400
    assert body["code"] == "INVALID_REQUEST"
    assert "R$ 500.00" in body["error"]
    assert body["details"] == {"valor_restante": "500.00"}

    accepted = client.post(
        "/v1/pagamentos",
        json=payment_body(segunda, "1.00"),
        headers=funcionario_headers,
    )
    assert accepted.status_code == 201
    assert accepted.json()["parcela"]["valorRestante"] == "499.00"


def test_paying_every_installment_fulfills_agreement_once(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(valores=("300.00", "200.00"))

    for parcela_id, valor in zip(seeded.parcela_ids, ("300.00", "200.00"), strict=True):
        response = client.post(
            "/v1/pagamentos",
            json=payment_body(parcela_id, valor),
            headers=funcionario_headers,
        )
        assert response.status_code == 201

    assert response.json()["acordoCumprido"] is True
    assert response.json()["message"] == "Pagamento registrado. Acordo cumprido."

    with sqlite_session_factory() as session:
        acordo = session.get(Acordo, seeded.acordo_id)
        processo = session.get(Processo, seeded.processo_id)
        historicos = session.scalars(
            select(HistoricoProcesso).where(
                HistoricoProcesso.processo_id == seeded.processo_id,
                HistoricoProcesso.titulo == "Acordo de Pagamento Cumprido",
            )
        ).all()
        logs = session.scalars(
            select(LogAuditoria).where(LogAuditoria.entidade == "PagamentoParcela")
        ).all()

    assert acordo is not None
    assert acordo.status == AcordoStatus.CUMPRIDO
    assert processo is not None
    assert processo.status == ProcessoStatus.CONCLUIDO
    assert len(historicos) == 1
    assert len(logs) == 2


def test_payment_on_cancelled_agreement_returns_400(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(acordo_status=AcordoStatus.CANCELADO)

    response = client.post(
        "/v1/pagamentos",
        json=payment_body(seeded.parcela_ids[0], "10.00"),
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"


def test_payment_for_unknown_installment_returns_404(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    response = client.post(
        "/v1/pagamentos",
        json=payment_body(uuid4(), "10.00"),
        headers=funcionario_headers,
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_viewer_cannot_register_payment(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    visualizador_headers: dict[str, str],
) -> None:
    seeded = seed_acordo()

    response = client.post(
        "/v1/pagamentos",
        json=payment_body(seeded.parcela_ids[0], "10.00"),
        headers=visualizador_headers,
    )

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_payment_without_session_returns_401(
    client: TestClient,
    seed_acordo: Callable[..., Any],
) -> None:
    seeded = seed_acordo()

    response = client.post(
        "/v1/pagamentos",
        json=payment_body(seeded.parcela_ids[0], "10.00"),
    )

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"


def test_invalid_payment_method_returns_400(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo()
    body = payment_body(seeded.parcela_ids[0], "10.00")
    body["formaPagamento"] = "cheque"

    response = client.post("/v1/pagamentos", json=body, headers=funcionario_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"
