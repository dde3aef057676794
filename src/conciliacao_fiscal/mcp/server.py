"""MCP server exposing conciliacao_fiscal agreement capabilities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, Protocol

import httpx
from fastmcp import FastMCP

from conciliacao_fiscal.core.settings import get_settings

FormaPagamento = Literal[
    "dinheiro",
    "pix",
    "transferencia",
    "boleto",
    "cartao",
    "dacao",
    "compensacao",
]
ParamValue = str | int | float | bool | None
ParamsMapping = Mapping[str, ParamValue]


class APIRequester(Protocol):
    """Requester abstraction to simplify HTTP boundary testing."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: ParamsMapping | None = None,
        json_body: Mapping[str, object] | None = None,
    ) -> object: ...


@dataclass(slots=True, frozen=True)
class HTTPAPIRequester:
    """HTTP client wrapper for the conciliacao_fiscal API.

    Every request carries the service identity headers expected by the API
    role guard.
    """

    base_url: str
    timeout_seconds: float
    headers: Mapping[str, str] = field(default_factory=dict)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: ParamsMapping | None = None,
        json_body: Mapping[str, object] | None = None,
    ) -> object:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            headers=dict(self.headers),
        ) as client:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=dict(json_body) if json_body else None,
            )

        if response.is_success:
            return _parse_json_response(response)
        raise RuntimeError(_build_api_error(response))


def _parse_json_response(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise RuntimeError(
            f"API returned a non-JSON response with status {response.status_code}."
        ) from exc


def _build_api_error(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return f"API request failed with status {response.status_code}: {text}"
        return f"API request failed with status {response.status_code}."

    if isinstance(payload, Mapping):
        error_code = payload.get("code")
        error_message = payload.get("error")
        details = payload.get("details")
        if isinstance(error_code, str) and isinstance(error_message, str):
            if details is None:
                return f"API error {error_code}: {error_message}"
            return f"API error {error_code}: {error_message} | details={details}"

    return f"API request failed with status {response.status_code}: {payload}"


def _normalize_base_url(value: str) -> str:
    return value.rstrip("/")


def create_mcp_server(
    *,
    api_base_url: str | None = None,
    timeout_seconds: float | None = None,
    requester: APIRequester | None = None,
) -> FastMCP:
    """Create MCP server with agreement tools mapped to REST endpoints."""

    settings = get_settings()
    resolved_base_url = _normalize_base_url(api_base_url or settings.mcp_api_base_url)
    resolved_timeout = (
        settings.mcp_api_timeout_seconds if timeout_seconds is None else timeout_seconds
    )
    if resolved_timeout <= 0:
        raise ValueError("MCP API timeout must be greater than zero.")

    mcp = FastMCP(name="Conciliação Fiscal")
    api_requester: APIRequester = requester or HTTPAPIRequester(
        base_url=resolved_base_url,
        timeout_seconds=resolved_timeout,
        headers={
            settings.auth_user_header: settings.mcp_user_id,
            settings.auth_role_header: settings.mcp_user_role,
        },
    )

    @mcp.tool
    async def consultar_acordo(acordo_id: str) -> object:
        """Return an agreement with installments, payments and summary."""

        return await api_requester.request("GET", f"/v1/acordos/{acordo_id}")

    @mcp.tool
    async def listar_acordos(
        search: str | None = None,
        status: str | None = None,
        tipo: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> object:
        """List agreements newest first, filtered by case number or taxpayer."""

        params: dict[str, str | int | float | bool | None] = {
            "limit": limit,
            "offset": offset,
        }
        if search is not None:
            params["search"] = search
        if status is not None:
            params["status"] = status
        if tipo is not None:
            params["tipo"] = tipo

        return await api_requester.request("GET", "/v1/acordos", params=params)

    @mcp.tool
    async def registrar_pagamento(
        parcela_id: str,
        valor_pago: str,
        forma_pagamento: FormaPagamento,
        data_pagamento: str,
        numero_comprovante: str | None = None,
        observacoes: str | None = None,
    ) -> object:
        """Register a payment on one installment of an active agreement."""

        payload: dict[str, object] = {
            "parcelaId": parcela_id,
            "valorPago": valor_pago,
            "formaPagamento": forma_pagamento,
            "dataPagamento": data_pagamento,
        }
        if numero_comprovante is not None:
            payload["numeroComprovante"] = numero_comprovante
        if observacoes is not None:
            payload["observacoes"] = observacoes

        return await api_requester.request(
            "POST",
            "/v1/pagamentos",
            json_body=payload,
        )

    @mcp.tool
    async def relatorio_parcelas_vencidas(dias: int = 0) -> object:
        """List overdue installments with late fee and interest."""

        if dias < 0:
            raise ValueError("dias must be zero or greater.")
        return await api_requester.request(
            "GET",
            "/v1/acordos/status",
            params={"acao": "relatorio-vencidas", "dias": dias},
        )

    @mcp.tool
    async def atualizar_status_parcelas() -> object:
        """Mark past-due installments overdue and their agreements vencido."""

        return await api_requester.request(
            "GET",
            "/v1/acordos/status",
            params={"acao": "atualizar"},
        )

    @mcp.tool
    async def concluir_acordo(
        acordo_id: str,
        atualizar_processo: bool = False,
        observacoes: str | None = None,
    ) -> object:
        """Conclude a compensation or payment-in-kind agreement."""

        payload: dict[str, object] = {"atualizarProcesso": atualizar_processo}
        if observacoes is not None:
            payload["observacoes"] = observacoes

        return await api_requester.request(
            "PATCH",
            f"/v1/acordos/{acordo_id}/concluir",
            json_body=payload,
        )

    return mcp


def main() -> None:
    """Run the MCP server over stdio."""

    create_mcp_server().run()


if __name__ == "__main__":
    main()
