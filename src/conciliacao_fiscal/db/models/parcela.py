"""Installment and installment payment ORM models."""

from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conciliacao_fiscal.db.base import Base


class TipoParcela(enum.StrEnum):
    """Down payment or regular installment."""

    ENTRADA = "ENTRADA"
    PARCELA_ACORDO = "PARCELA_ACORDO"


class ParcelaStatus(enum.StrEnum):
    """Installment payment states."""

    PENDENTE = "PENDENTE"
    PAGO = "PAGO"
    ATRASADO = "ATRASADO"
    CANCELADO = "CANCELADO"


class FormaPagamento(enum.StrEnum):
    """Accepted payment methods."""

    DINHEIRO = "dinheiro"
    PIX = "pix"
    TRANSFERENCIA = "transferencia"
    BOLETO = "boleto"
    CARTAO = "cartao"
    DACAO = "dacao"
    COMPENSACAO = "compensacao"


class Parcela(Base):
    """Installment of a settlement agreement."""

    __tablename__ = "parcelas"
    __table_args__ = (
        UniqueConstraint(
            "acordo_id",
            "tipo_parcela",
            "numero",
            name="uq_parcelas_acordo_tipo_numero",
        ),
        CheckConstraint("valor > 0", name="ck_parcelas_valor_positive"),
        CheckConstraint("numero >= 0", name="ck_parcelas_numero_non_negative"),
        Index("ix_parcelas_status_vencimento", "status", "data_vencimento"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    acordo_id: Mapped[UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
    )
    tipo_parcela: Mapped[TipoParcela] = mapped_column(
        Enum(
            TipoParcela,
            name="tipo_parcela",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=TipoParcela.PARCELA_ACORDO,
    )
    numero: Mapped[int] = mapped_column(Integer, nullable=False)
    valor: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[ParcelaStatus] = mapped_column(
        Enum(
            ParcelaStatus,
            name="parcela_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=ParcelaStatus.PENDENTE,
    )
    data_vencimento: Mapped[date] = mapped_column(Date, nullable=False)
    data_pagamento: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    acordo: Mapped[Any] = relationship("Acordo", back_populates="parcelas")
    pagamentos: Mapped[list[Any]] = relationship(
        "PagamentoParcela",
        back_populates="parcela",
        order_by="PagamentoParcela.data_pagamento",
    )


class PagamentoParcela(Base):
    """Append-only payment registered against an installment."""

    __tablename__ = "pagamentos_parcela"
    __table_args__ = (
        CheckConstraint(
            "valor_pago > 0",
            name="ck_pagamentos_parcela_valor_pago_positive",
        ),
        Index("ix_pagamentos_parcela_parcela_id", "parcela_id"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    parcela_id: Mapped[UUID] = mapped_column(
        ForeignKey("parcelas.id", ondelete="CASCADE"),
        nullable=False,
    )
    valor_pago: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    data_pagamento: Mapped[date] = mapped_column(Date, nullable=False)
    forma_pagamento: Mapped[FormaPagamento] = mapped_column(
        Enum(
            FormaPagamento,
            name="forma_pagamento",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    numero_comprovante: Mapped[str | None] = mapped_column(String(120), nullable=True)
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)
    usuario_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    parcela: Mapped[Any] = relationship("Parcela", back_populates="pagamentos")
