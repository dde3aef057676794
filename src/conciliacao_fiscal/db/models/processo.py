"""Administrative tax case ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conciliacao_fiscal.db.base import Base


class TipoProcesso(enum.StrEnum):
    """Kinds of settlement a case can negotiate."""

    COMPENSACAO = "COMPENSACAO"
    DACAO_PAGAMENTO = "DACAO_PAGAMENTO"
    TRANSACAO_EXCEPCIONAL = "TRANSACAO_EXCEPCIONAL"


class ProcessoStatus(enum.StrEnum):
    """Case lifecycle states."""

    RECEPCIONADO = "RECEPCIONADO"
    EM_ANALISE = "EM_ANALISE"
    EM_PAUTA = "EM_PAUTA"
    SUSPENSO = "SUSPENSO"
    PEDIDO_VISTA = "PEDIDO_VISTA"
    PEDIDO_DILIGENCIA = "PEDIDO_DILIGENCIA"
    JULGADO = "JULGADO"
    ACORDO_FIRMADO = "ACORDO_FIRMADO"
    EM_CUMPRIMENTO = "EM_CUMPRIMENTO"
    CONCLUIDO = "CONCLUIDO"


class Processo(Base):
    """Administrative tax case brought by a taxpayer."""

    __tablename__ = "processos"
    __table_args__ = (
        UniqueConstraint("numero", name="uq_processos_numero"),
        CheckConstraint(
            "valor_original >= 0",
            name="ck_processos_valor_original_non_negative",
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    numero: Mapped[str] = mapped_column(String(40), nullable=False)
    tipo: Mapped[TipoProcesso] = mapped_column(
        Enum(
            TipoProcesso,
            name="tipo_processo",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    status: Mapped[ProcessoStatus] = mapped_column(
        Enum(
            ProcessoStatus,
            name="processo_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=ProcessoStatus.RECEPCIONADO,
    )
    valor_original: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    valor_negociado: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2),
        nullable=True,
    )
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)
    contribuinte_id: Mapped[UUID] = mapped_column(
        ForeignKey("contribuintes.id"),
        nullable=False,
    )
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

    contribuinte: Mapped[Any] = relationship(
        "Contribuinte",
        back_populates="processos",
    )
    acordos: Mapped[list[Any]] = relationship(
        "Acordo",
        back_populates="processo",
    )
    decisoes: Mapped[list[Any]] = relationship(
        "Decisao",
        back_populates="processo",
    )
