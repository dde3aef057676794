from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi.testclient import TestClient

from conciliacao_fiscal.db.models.acordo import AcordoStatus


def create_processo(
    client: TestClient,
    headers: dict[str, str],
    *,
    numero: str = "PAF-0100/2026",
    tipo: str = "TRANSACAO_EXCEPCIONAL",
) -> dict[str, Any]:
    response = client.post(
        "/v1/processos",
        json={
            "numero": f"  {numero} ",
            "tipo": tipo,
            "valorOriginal": "12000.00",
            "contribuinte": {
                "nome": "Comercial Alfa Ltda",
                "documento": "12.345.678/0001-90",
                "email": "fiscal@alfa.com.br",
            },
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def move_to_pauta(
    client: TestClient,
    headers: dict[str, str],
    processo_id: str,
) -> tuple[str, str]:
    analise = client.put(
        f"/v1/processos/{processo_id}/status",
        json={"status": "EM_ANALISE"},
        headers=headers,
    )
    assert analise.status_code == 200

    pauta = client.post(
        "/v1/pautas",
        json={"numero": "P-01/2026", "dataPauta": "2026-03-10"},
        headers=headers,
    )
    assert pauta.status_code == 201
    pauta_id = pauta.json()["id"]

    entry = client.post(
        f"/v1/pautas/{pauta_id}/processos",
        json={
            "processoId": processo_id,
            "relator": "Conselheira Ana Souza",
            "revisores": ["Conselheiro Bruno Lima"],
        },
        headers=headers,
    )
    assert entry.status_code == 201
    assert entry.json()["ordem"] == 1

    sessao = client.post(
        "/v1/sessoes",
        json={"pautaId": pauta_id, "presidente": "Conselheiro Carlos"},
        headers=headers,
    )
    assert sessao.status_code == 201
    return pauta_id, sessao.json()["id"]


def test_case_flows_from_reception_to_agreement(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    processo = create_processo(client, funcionario_headers)
    assert processo["numero"] == "PAF-0100/2026"
    assert processo["status"] == "RECEPCIONADO"
    assert processo["valorOriginal"] == "12000.00"
    processo_id = processo["id"]

    _, sessao_id = move_to_pauta(client, funcionario_headers, processo_id)

    decisao = client.post(
        f"/v1/sessoes/{sessao_id}/decisoes",
        json={
            "processoId": processo_id,
            "tipoResultado": "JULGADO",
            "tipoDecisao": "DEFERIDO",
            "votos": [
                {
                    "tipoVoto": "RELATOR",
                    "nomeVotante": "Conselheira Ana Souza",
                    "posicaoVoto": "DEFERIDO",
                    "ordemApresentacao": 1,
                },
                {
                    "tipoVoto": "CONSELHEIRO",
                    "nomeVotante": "Conselheiro Carlos",
                    "posicaoVoto": "DEFERIDO",
                    "isPresidente": True,
                },
            ],
        },
        headers=funcionario_headers,
    )
    assert decisao.status_code == 201
    assert decisao.json()["tipoDecisao"] == "DEFERIDO"
    assert len(decisao.json()["votos"]) == 2

    julgado = client.get(f"/v1/processos/{processo_id}", headers=funcionario_headers)
    assert julgado.json()["status"] == "JULGADO"

    acordo = client.post(
        "/v1/acordos",
        json={
            "processoId": processo_id,
            "valorTotal": "12000.00",
            "valorDesconto": "2000.00",
            "valorEntrada": "1000.00",
            "numeroParcelas": 3,
            "dataAssinatura": "2026-03-15",
            "dataVencimento": "2026-04-10",
            "custasAdvocaticias": "500.00",
        },
        headers=funcionario_headers,
    )
    assert acordo.status_code == 201
    acordo_body = acordo.json()
    assert acordo_body["valorFinal"] == "10000.00"
    assert acordo_body["status"] == "ativo"

    detail = client.get(
        f"/v1/acordos/{acordo_body['id']}",
        headers=funcionario_headers,
    )
    parcelas = detail.json()["parcelas"]
    assert [(p["tipoParcela"], p["valor"], p["dataVencimento"]) for p in parcelas] == [
        ("ENTRADA", "1000.00", "2026-04-10"),
        ("PARCELA_ACORDO", "3000.00", "2026-05-10"),
        ("PARCELA_ACORDO", "3000.00", "2026-06-10"),
        ("PARCELA_ACORDO", "3000.00", "2026-07-10"),
    ]
    assert detail.json()["transacao"]["custasAdvocaticias"] == "500.00"

    em_cumprimento = client.get(
        f"/v1/processos/{processo_id}",
        headers=funcionario_headers,
    )
    assert em_cumprimento.json()["status"] == "EM_CUMPRIMENTO"

    segundo = client.post(
        "/v1/acordos",
        json={
            "processoId": processo_id,
            "valorTotal": "100.00",
            "numeroParcelas": 1,
            "dataAssinatura": "2026-03-15",
            "dataVencimento": "2026-04-10",
        },
        headers=funcionario_headers,
    )
    assert segundo.status_code == 400
    assert segundo.json()["code"] == "INVALID_STATE"

    historico = client.get(
        f"/v1/processos/{processo_id}/historico",
        headers=funcionario_headers,
    )
    assert historico.status_code == 200
    tipos = {item["tipo"] for item in historico.json()["items"]}
    assert {"PAUTA", "DECISAO", "ACORDO"} <= tipos


def test_relator_cannot_request_vista(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    processo = create_processo(client, funcionario_headers)
    _, sessao_id = move_to_pauta(client, funcionario_headers, processo["id"])

    response = client.post(
        f"/v1/sessoes/{sessao_id}/decisoes",
        json={
            "processoId": processo["id"],
            "tipoResultado": "PEDIDO_VISTA",
            "conselheiroPedidoVista": "  conselheira   ana souza ",
        },
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_vista_moves_case_and_adds_reviewer(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    processo = create_processo(client, funcionario_headers)
    _, sessao_id = move_to_pauta(client, funcionario_headers, processo["id"])

    response = client.post(
        f"/v1/sessoes/{sessao_id}/decisoes",
        json={
            "processoId": processo["id"],
            "tipoResultado": "PEDIDO_VISTA",
            "conselheiroPedidoVista": "Conselheira Daniela",
            "prazoVista": "2026-04-10",
        },
        headers=funcionario_headers,
    )

    assert response.status_code == 201
    assert response.json()["tipoDecisao"] is None
    current = client.get(f"/v1/processos/{processo['id']}", headers=funcionario_headers)
    assert current.json()["status"] == "PEDIDO_VISTA"

    finalizar = client.post(
        f"/v1/sessoes/{sessao_id}/finalizar",
        headers=funcionario_headers,
    )
    assert finalizar.status_code == 200
    assert finalizar.json()["dataFim"] is not None


def test_agreement_requires_judged_case(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    processo = create_processo(client, funcionario_headers)

    response = client.post(
        "/v1/acordos",
        json={
            "processoId": processo["id"],
            "valorTotal": "1000.00",
            "numeroParcelas": 2,
            "dataAssinatura": "2026-03-15",
            "dataVencimento": "2026-04-10",
        },
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"


def test_invalid_status_transition_returns_400(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    processo = create_processo(client, funcionario_headers)

    response = client.put(
        f"/v1/processos/{processo['id']}/status",
        json={"status": "CONCLUIDO"},
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_STATE"
    assert body["details"] == {
        "status_atual": "RECEPCIONADO",
        "status_destino": "CONCLUIDO",
    }


def test_duplicate_case_number_returns_400(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    create_processo(client, funcionario_headers)

    response = client.post(
        "/v1/processos",
        json={
            "numero": "PAF-0100/2026",
            "tipo": "COMPENSACAO",
            "valorOriginal": "10.00",
            "contribuinte": {"nome": "Outro", "documento": "98765432100"},
        },
        headers=funcionario_headers,
    )

    assert response.status_code == 400


def test_unknown_case_returns_404(
    client: TestClient,
    visualizador_headers: dict[str, str],
) -> None:
    response = client.get(
        "/v1/processos/00000000-0000-0000-0000-000000000000",
        headers=visualizador_headers,
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_case_under_agreement_cannot_leave_em_cumprimento(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo()

    response = client.put(
        f"/v1/processos/{seeded.processo_id}/status",
        json={"status": "CONCLUIDO"},
        headers=funcionario_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_STATE"
    assert body["details"] == {
        "status_atual": "EM_CUMPRIMENTO",
        "status_destino": "CONCLUIDO",
    }
    current = client.get(
        f"/v1/processos/{seeded.processo_id}",
        headers=funcionario_headers,
    )
    assert current.json()["status"] == "EM_CUMPRIMENTO"


def test_case_with_cancelled_agreement_can_be_concluded(
    client: TestClient,
    seed_acordo: Callable[..., Any],
    funcionario_headers: dict[str, str],
) -> None:
    seeded = seed_acordo(acordo_status=AcordoStatus.CANCELADO)

    response = client.put(
        f"/v1/processos/{seeded.processo_id}/status",
        json={"status": "CONCLUIDO"},
        headers=funcionario_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "CONCLUIDO"


def test_compensation_agreement_stores_costs_and_fees(
    client: TestClient,
    funcionario_headers: dict[str, str],
) -> None:
    processo = create_processo(client, funcionario_headers, tipo="COMPENSACAO")
    processo_id = processo["id"]
    _, sessao_id = move_to_pauta(client, funcionario_headers, processo_id)
    decisao = client.post(
        f"/v1/sessoes/{sessao_id}/decisoes",
        json={
            "processoId": processo_id,
            "tipoResultado": "JULGADO",
            "tipoDecisao": "DEFERIDO",
            "votos": [
                {
                    "tipoVoto": "RELATOR",
                    "nomeVotante": "Conselheira Ana Souza",
                    "posicaoVoto": "DEFERIDO",
                    "ordemApresentacao": 1,
                },
            ],
        },
        headers=funcionario_headers,
    )
    assert decisao.status_code == 201

    acordo = client.post(
        "/v1/acordos",
        json={
            "processoId": processo_id,
            "valorTotal": "12000.00",
            "numeroParcelas": 1,
            "dataAssinatura": "2026-03-15",
            "dataVencimento": "2026-04-10",
            "custasAdvocaticias": "120.00",
            "honorariosValor": "300.00",
            "honorariosDataVencimento": "2026-05-10",
        },
        headers=funcionario_headers,
    )
    assert acordo.status_code == 201

    detail = client.get(
        f"/v1/acordos/{acordo.json()['id']}",
        headers=funcionario_headers,
    )
    body = detail.json()
    assert body["transacao"] is None
    assert body["honorarios"]["custasAdvocaticias"] == "120.00"
    assert body["honorarios"]["honorariosValor"] == "300.00"
    assert body["honorarios"]["honorariosDataVencimento"] == "2026-05-10"
    assert body["honorarios"]["honorariosDataPagamento"] is None
