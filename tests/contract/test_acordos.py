from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.historico import HistoricoProcesso, LogAuditoria
from conciliacao_fiscal.db.models.parcela import Parcela, ParcelaStatus
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus, TipoProcesso

PAST_DUE = (date(2020, 1, 10), date(2020, 2, 10))


def test_get_acordo_returns_installments_and_summary(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
    visualizador_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(valores=("1000.00", "500.00"))
    paid = client.post(
        "/v1/pagamentos",
        json={
            "parcelaId": str(seeded.parcela_ids[1]),
            "valorPago": "500.00",
            "formaPagamento": "transferencia",
            "dataPagamento": "2026-02-01",
        },
        headers=funcionario_headers,
    )
    assert paid.status_code == 201

    response = client.get(
        f"/v1/acordos/{seeded.acordo_id}",
        headers=visualizador_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["valorFinal"] == "1500.00"
    assert len(body["parcelas"]) == 2
    assert body["parcelas"][1]["pagamentos"][0]["valorPago"] == "500.00"
    assert body["resumo"] == {
        "totalPago": "500.00",
        "valorRestante": "1000.00",
        "percentualPago": "33.33",
        "parcelasPagas": 1,
        "parcelasPendentes": 1,
        "parcelasAtrasadas": 0,
    }
    assert body["transacao"] is not None


def test_conclude_rejects_transacao_excepcional(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(tipo=TipoProcesso.TRANSACAO_EXCEPCIONAL)

    response = client.patch(
        f"/v1/acordos/{seeded.acordo_id}/concluir",
        json={"atualizarProcesso": True},
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"


def test_conclude_compensacao_updates_case(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(tipo=TipoProcesso.COMPENSACAO)

    response = client.patch(
        f"/v1/acordos/{seeded.acordo_id}/concluir",
        json={"atualizarProcesso": True, "observacoes": "Créditos compensados."},
        headers=funcionario_headers,
    )

    assert response.status_code == 200
    assert response.json()["acordo"]["status"] == "cumprido"

    with sqlite_session_factory() as session:
        processo = session.get(Processo, seeded.processo_id)
        titulos = session.scalars(
            select(HistoricoProcesso.titulo).where(
                HistoricoProcesso.processo_id == seeded.processo_id
            )
        ).all()
    assert processo is not None
    assert processo.status == ProcessoStatus.CONCLUIDO
    assert sorted(titulos) == ["Acordo Concluído", "Processo Concluído"]


def test_unpaid_costs_block_fulfillment_until_settled(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(valores=("200.00",), custas_advocaticias="150.00")

    payment = client.post(
        "/v1/pagamentos",
        json={
            "parcelaId": str(seeded.parcela_ids[0]),
            "valorPago": "200.00",
            "formaPagamento": "pix",
            "dataPagamento": "2026-02-01",
        },
        headers=funcionario_headers,
    )
    assert payment.status_code == 201
    assert payment.json()["parcela"]["status"] == "PAGO"
    assert payment.json()["acordoCumprido"] is False

    custas = client.put(
        f"/v1/acordos/{seeded.acordo_id}/custas",
        json={
            "custasDataVencimento": "2026-02-15",
            "custasDataPagamento": "2026-02-12",
        },
        headers=funcionario_headers,
    )

    assert custas.status_code == 200
    body = custas.json()
    assert body["acordoCumprido"] is True
    assert body["transacao"]["custasAdvocaticias"] == "150.00"
    assert body["transacao"]["custasDataPagamento"] == "2026-02-12"

    with sqlite_session_factory() as session:
        acordo = session.get(Acordo, seeded.acordo_id)
        processo = session.get(Processo, seeded.processo_id)
    assert acordo is not None
    assert acordo.status == AcordoStatus.CUMPRIDO
    assert processo is not None
    assert processo.status == ProcessoStatus.CONCLUIDO


def test_update_costs_without_costs_returns_400(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo()

    response = client.put(
        f"/v1/acordos/{seeded.acordo_id}/custas",
        json={"custasDataPagamento": "2026-02-12"},
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_executing_every_component_fulfills_agreement(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(tipo=TipoProcesso.DACAO_PAGAMENTO, detalhes=2)
    primeiro, segundo = seeded.detalhe_ids

    first = client.patch(
        f"/v1/acordos/{seeded.acordo_id}/detalhes",
        json={"detalheId": str(primeiro), "status": "EXECUTADO"},
        headers=funcionario_headers,
    )
    assert first.status_code == 200
    assert first.json()["detalhe"]["status"] == "EXECUTADO"
    assert first.json()["detalhe"]["dataExecucao"] is not None
    assert first.json()["acordoCumprido"] is False

    second = client.patch(
        f"/v1/acordos/{seeded.acordo_id}/detalhes",
        json={"detalheId": str(segundo), "status": "EXECUTADO"},
        headers=funcionario_headers,
    )
    assert second.status_code == 200
    assert second.json()["acordoCumprido"] is True

    with sqlite_session_factory() as session:
        processo = session.get(Processo, seeded.processo_id)
    assert processo is not None
    assert processo.status == ProcessoStatus.ACORDO_FIRMADO


def test_cancel_requires_admin_and_reopens_case(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    admin_headers: dict[str, str],
    funcionario_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(valores=("100.00", "100.00"))

    forbidden = client.post(
        f"/v1/acordos/{seeded.acordo_id}/cancelar",
        json={"motivo": "Descumprimento"},
        headers=funcionario_headers,
    )
    assert forbidden.status_code == 403

    response = client.post(
        f"/v1/acordos/{seeded.acordo_id}/cancelar",
        json={"motivo": "Descumprimento"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["acordo"]["status"] == "cancelado"

    with sqlite_session_factory() as session:
        processo = session.get(Processo, seeded.processo_id)
        statuses = session.scalars(
            select(Parcela.status).where(Parcela.acordo_id == seeded.acordo_id)
        ).all()
    assert processo is not None
    assert processo.status == ProcessoStatus.JULGADO
    assert set(statuses) == {ParcelaStatus.CANCELADO}

    again = client.post(
        f"/v1/acordos/{seeded.acordo_id}/cancelar",
        json={},
        headers=admin_headers,
    )
    assert again.status_code == 400
    assert again.json()["code"] == "INVALID_STATE"


def test_status_batch_is_idempotent(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    admin_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(valores=("100.00", "100.00"), vencimentos=PAST_DUE)

    first = client.post("/v1/acordos/status", headers=admin_headers)
    assert first.status_code == 200
    assert first.json() == {
        "message": "Status das parcelas atualizado.",
        "parcelasAtualizadas": 2,
        "acordosAtualizados": 1,
    }

    second = client.post("/v1/acordos/status", headers=admin_headers)
    assert second.status_code == 200
    assert second.json()["parcelasAtualizadas"] == 0
    assert second.json()["acordosAtualizados"] == 0

    with sqlite_session_factory() as session:
        acordo = session.get(Acordo, seeded.acordo_id)
        logs = session.scalars(
            select(LogAuditoria).where(
                LogAuditoria.acao == "ATUALIZAR_STATUS_PARCELAS"
            )
        ).all()
    assert acordo is not None
    assert acordo.status == AcordoStatus.VENCIDO
    assert len(logs) == 1


def test_overdue_report_lists_late_charges(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    admin_headers: dict[str, str],
    visualizador_headers: dict[str, str],
) -> None:
    seed_acordo(valores=("1000.00", "100.00"), vencimentos=PAST_DUE)
    assert client.post("/v1/acordos/status", headers=admin_headers).status_code == 200

    response = client.get(
        "/v1/acordos/status",
        params={"acao": "relatorio-vencidas", "dias": 30},
        headers=visualizador_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["acao"] == "relatorio-vencidas"
    assert body["dias"] == 30
    assert body["total"] == 2
    first = body["parcelas"][0]
    assert first["valor"] == "1000.00"
    assert first["valorRestante"] == "1000.00"
    assert first["multa"] == "20.00"
    assert float(first["juros"]) > 0
    assert first["diasVencido"] > 30
    assert first["processoNumero"].startswith("PAF-")
    assert first["contribuinteNome"].startswith("Contribuinte")


def test_viewer_cannot_run_status_batch_through_get(
    client: TestClient,
    visualizador_headers: dict[str, str],
    funcionario_headers: dict[str, str],
) -> None:
    forbidden = client.get(
        "/v1/acordos/status",
        params={"acao": "atualizar"},
        headers=visualizador_headers,
    )
    assert forbidden.status_code == 403

    allowed = client.get(
        "/v1/acordos/status",
        params={"acao": "atualizar"},
        headers=funcionario_headers,
    )
    assert allowed.status_code == 200
    assert allowed.json()["parcelasAtualizadas"] == 0


def test_overdue_report_rejects_negative_days(
    client: TestClient,
    visualizador_headers: dict[str, str],
) -> None:
    response = client.get(
        "/v1/acordos/status",
        params={"dias": -1},
        headers=visualizador_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_status_batch_post_requires_admin(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    response = client.post("/v1/acordos/status", headers=funcionario_headers)

    assert response.status_code == 403


def test_conclude_cancelled_agreement_returns_400(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(
        tipo=TipoProcesso.COMPENSACAO,
        acordo_status=AcordoStatus.CANCELADO,
    )

    response = client.patch(
        f"/v1/acordos/{seeded.acordo_id}/concluir",
        json={"atualizarProcesso": True},
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_STATE"
    assert body["details"] == {"acordo_status": "cancelado"}


def test_component_of_overdue_agreement_cannot_change(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    seeded = seed_acordo(
        tipo=TipoProcesso.DACAO_PAGAMENTO,
        acordo_status=AcordoStatus.VENCIDO,
        detalhes=1,
    )

    response = client.patch(
        f"/v1/acordos/{seeded.acordo_id}/detalhes",
        json={"detalheId": str(seeded.detalhe_ids[0]), "status": "EXECUTADO"},
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_STATE"
    assert body["details"] == {"acordo_status": "vencido"}
    with sqlite_session_factory() as session:
        acordo = session.get(Acordo, seeded.acordo_id)
    assert acordo is not None
    assert acordo.status == AcordoStatus.VENCIDO


def test_costs_of_cancelled_agreement_cannot_change(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(
        acordo_status=AcordoStatus.CANCELADO,
        custas_advocaticias="150.00",
    )

    response = client.put(
        f"/v1/acordos/{seeded.acordo_id}/custas",
        json={
            "custasDataVencimento": "2026-03-01",
            "custasDataPagamento": "2026-03-01",
        },
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_STATE"
    assert body["details"] == {"acordo_status": "cancelado"}
