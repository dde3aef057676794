"""Schemas for installment and payment endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_validator

from conciliacao_fiscal.api.schemas.common import MONEY_PATTERN, CamelModel
from conciliacao_fiscal.db.models.parcela import (
    FormaPagamento,
    PagamentoParcela,
    Parcela,
    ParcelaStatus,
    TipoParcela,
)
from conciliacao_fiscal.domain.money import format_money


class RegisterPaymentRequest(CamelModel):
    """Payload for registering a payment on any installment."""

    parcela_id: UUID
    valor_pago: Decimal
    forma_pagamento: FormaPagamento
    data_pagamento: date
    numero_comprovante: str | None = Field(default=None, max_length=120)
    observacoes: str | None = None

    @field_validator("numero_comprovante")
    @classmethod
    def validate_comprovante(cls, value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class RegisterParcelaPaymentRequest(CamelModel):
    """Payload for registering a payment on the installment in the path."""

    valor_pago: Decimal
    forma_pagamento: FormaPagamento
    data_pagamento: date | None = None
    numero_comprovante: str | None = Field(default=None, max_length=120)
    observacoes: str | None = None


class UpdateParcelaRequest(CamelModel):
    """Payload for manual installment adjustment."""

    data_vencimento: date
    status: ParcelaStatus
    data_pagamento: date | None = None


class PagamentoResponse(CamelModel):
    """Serialized installment payment."""

    id: UUID
    parcela_id: UUID
    valor_pago: str = Field(pattern=MONEY_PATTERN)
    data_pagamento: date
    forma_pagamento: FormaPagamento
    numero_comprovante: str | None
    observacoes: str | None
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, pagamento: PagamentoParcela) -> PagamentoResponse:
        return cls(
            id=pagamento.id,
            parcela_id=pagamento.parcela_id,
            valor_pago=format_money(pagamento.valor_pago),
            data_pagamento=pagamento.data_pagamento,
            forma_pagamento=pagamento.forma_pagamento,
            numero_comprovante=pagamento.numero_comprovante,
            observacoes=pagamento.observacoes,
            created_at=pagamento.created_at,
        )


class ParcelaResponse(CamelModel):
    """Serialized installment."""

    id: UUID
    acordo_id: UUID
    tipo_parcela: TipoParcela
    numero: int
    valor: str = Field(pattern=MONEY_PATTERN)
    status: ParcelaStatus
    data_vencimento: date
    data_pagamento: date | None
    total_pago: str | None = None
    valor_restante: str | None = None
    pagamentos: list[PagamentoResponse] | None = None

    @classmethod
    def from_model(
        cls,
        parcela: Parcela,
        *,
        total_pago: Decimal | None = None,
        valor_restante: Decimal | None = None,
        pagamentos: list[PagamentoParcela] | None = None,
    ) -> ParcelaResponse:
        return cls(
            id=parcela.id,
            acordo_id=parcela.acordo_id,
            tipo_parcela=parcela.tipo_parcela,
            numero=parcela.numero,
            valor=format_money(parcela.valor),
            status=parcela.status,
            data_vencimento=parcela.data_vencimento,
            data_pagamento=parcela.data_pagamento,
            total_pago=format_money(total_pago) if total_pago is not None else None,
            valor_restante=(
                format_money(valor_restante) if valor_restante is not None else None
            ),
            pagamentos=(
                [PagamentoResponse.from_model(item) for item in pagamentos]
                if pagamentos is not None
                else None
            ),
        )


class PaymentResponse(CamelModel):
    """Result of a payment registration."""

    message: str
    pagamento: PagamentoResponse
    parcela: ParcelaResponse
    acordo_cumprido: bool


class UpdateParcelaResponse(CamelModel):
    """Result of a manual installment adjustment."""

    message: str
    parcela: ParcelaResponse
    pagamento_complementar: PagamentoResponse | None = None
    acordo_cumprido: bool
