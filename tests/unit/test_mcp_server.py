from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx
import pytest
from fastmcp import Client, FastMCP

from conciliacao_fiscal.mcp.server import _build_api_error, create_mcp_server


@dataclass
class FakeRequester:
    responses: dict[tuple[str, str], object]
    calls: list[dict[str, object]] = field(default_factory=list)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str | int | float | bool | None] | None = None,
        json_body: Mapping[str, object] | None = None,
    ) -> object:
        self.calls.append(
            {
                "method": method,
                "path": path,
                "params": dict(params) if params else None,
                "json_body": dict(json_body) if json_body else None,
            }
        )

        value = self.responses[(method, path)]
        if isinstance(value, Exception):
            raise value
        return value


def build_server(fake_requester: FakeRequester) -> FastMCP:
    return create_mcp_server(
        api_base_url="http://example.test",
        timeout_seconds=1,
        requester=fake_requester,
    )


def test_create_mcp_server_registers_expected_tools() -> None:
    async def scenario() -> list[str]:
        server = build_server(FakeRequester(responses={}))
        async with Client(server) as client:
            tools = await client.list_tools()
        return sorted(tool.name for tool in tools)

    assert asyncio.run(scenario()) == [
        "atualizar_status_parcelas",
        "concluir_acordo",
        "consultar_acordo",
        "listar_acordos",
        "registrar_pagamento",
        "relatorio_parcelas_vencidas",
    ]


def test_registrar_pagamento_sends_camel_case_payload() -> None:
    async def scenario() -> dict[str, object]:
        fake_requester = FakeRequester(
            responses={("POST", "/v1/pagamentos"): {"message": "ok"}}
        )
        async with Client(build_server(fake_requester)) as client:
            await client.call_tool(
                "registrar_pagamento",
                {
                    "parcela_id": "p-1",
                    "valor_pago": "600.00",
                    "forma_pagamento": "pix",
                    "data_pagamento": "2026-02-01",
                },
            )
        return fake_requester.calls[0]

    assert asyncio.run(scenario()) == {
        "method": "POST",
        "path": "/v1/pagamentos",
        "params": None,
        "json_body": {
            "parcelaId": "p-1",
            "valorPago": "600.00",
            "formaPagamento": "pix",
            "dataPagamento": "2026-02-01",
        },
    }


def test_relatorio_tool_queries_status_endpoint() -> None:
    expected_payload = {"total": 0, "parcelas": []}

    async def scenario() -> tuple[object, dict[str, object]]:
        fake_requester = FakeRequester(
            responses={("GET", "/v1/acordos/status"): expected_payload}
        )
        async with Client(build_server(fake_requester)) as client:
            result = await client.call_tool("relatorio_parcelas_vencidas", {"dias": 5})
        return result.data, fake_requester.calls[0]

    data, call = asyncio.run(scenario())
    assert data == expected_payload
    assert call["params"] == {"acao": "relatorio-vencidas", "dias": 5}


def test_listar_acordos_forwards_filters() -> None:
    async def scenario() -> dict[str, object]:
        fake_requester = FakeRequester(
            responses={("GET", "/v1/acordos"): {"items": [], "total": 0}}
        )
        async with Client(build_server(fake_requester)) as client:
            await client.call_tool(
                "listar_acordos",
                {"search": "PAF-0100", "status": "ativo", "limit": 10},
            )
        return fake_requester.calls[0]

    call = asyncio.run(scenario())
    assert call["path"] == "/v1/acordos"
    assert call["params"] == {
        "limit": 10,
        "offset": 0,
        "search": "PAF-0100",
        "status": "ativo",
    }


def test_create_mcp_server_rejects_non_positive_timeout() -> None:
    with pytest.raises(ValueError):
        create_mcp_server(
            api_base_url="http://example.test",
            timeout_seconds=0,
            requester=FakeRequester(responses={}),
        )


def test_build_api_error_reads_error_contract() -> None:
    response = httpx.Response(
        400,
        json={
            "error": "Causa: Valor excede saldo. Ação: Ajuste o valor.",
            "code": "INVALID_REQUEST",
            "details": {"valor_restante": "500.00"},
        },
    )

    assert _build_api_error(response) == (
        "API error INVALID_REQUEST: Causa: Valor excede saldo. Ação: Ajuste o valor."
        " | details={'valor_restante': '500.00'}"
    )


def test_build_api_error_falls_back_to_text() -> None:
    response = httpx.Response(502, text="Bad gateway")

    assert _build_api_error(response) == (
        "API request failed with status 502: Bad gateway"
    )
