"""Settlement agreement ORM models."""

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


class AcordoStatus(enum.StrEnum):
    """Agreement lifecycle states."""

    ATIVO = "ativo"
    CUMPRIDO = "cumprido"
    CANCELADO = "cancelado"
    VENCIDO = "vencido"


class TipoDetalhe(enum.StrEnum):
    """Asset or credit component offered in the agreement."""

    IMOVEL = "imovel"
    CREDITO = "credito"


class DetalheStatus(enum.StrEnum):
    """Execution state of an agreement component."""

    PENDENTE = "PENDENTE"
    EM_EXECUCAO = "EM_EXECUCAO"
    EXECUTADO = "EXECUTADO"
    CANCELADO = "CANCELADO"


class TipoInscricao(enum.StrEnum):
    """Tax-roll registration kinds."""

    IMOBILIARIA = "imobiliaria"
    ECONOMICA = "economica"


class SituacaoInscricao(enum.StrEnum):
    """Settlement state of a tax-roll registration."""

    PENDENTE = "pendente"
    QUITADO = "quitado"


class Acordo(Base):
    """Negotiated settlement of a judged case."""

    __tablename__ = "acordos"
    __table_args__ = (
        UniqueConstraint("numero_termo", name="uq_acordos_numero_termo"),
        CheckConstraint("valor_final > 0", name="ck_acordos_valor_final_positive"),
        CheckConstraint(
            "valor_entrada >= 0 AND valor_entrada < valor_final",
            name="ck_acordos_valor_entrada_range",
        ),
        CheckConstraint(
            "numero_parcelas >= 1",
            name="ck_acordos_numero_parcelas_positive",
        ),
        Index("ix_acordos_processo_status", "processo_id", "status"),
        Index("ix_acordos_created_at", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    processo_id: Mapped[UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
    )
    numero_termo: Mapped[str] = mapped_column(String(20), nullable=False)
    valor_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    valor_desconto: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    valor_entrada: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    valor_final: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    numero_parcelas: Mapped[int] = mapped_column(Integer, nullable=False)
    data_assinatura: Mapped[date] = mapped_column(Date, nullable=False)
    data_vencimento: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[AcordoStatus] = mapped_column(
        Enum(
            AcordoStatus,
            name="acordo_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=AcordoStatus.ATIVO,
    )
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)
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

    processo: Mapped[Any] = relationship("Processo", back_populates="acordos")
    parcelas: Mapped[list[Any]] = relationship(
        "Parcela",
        back_populates="acordo",
        order_by="Parcela.numero",
    )
    transacao: Mapped[Any] = relationship(
        "AcordoTransacao",
        back_populates="acordo",
        uselist=False,
    )
    honorarios: Mapped[Any] = relationship(
        "AcordoHonorarios",
        back_populates="acordo",
        uselist=False,
    )
    detalhes: Mapped[list[Any]] = relationship(
        "AcordoDetalhe",
        back_populates="acordo",
    )
    inscricoes: Mapped[list[Any]] = relationship(
        "AcordoInscricao",
        back_populates="acordo",
    )


class AcordoTransacao(Base):
    """Legal costs and fees attached to an exceptional transaction."""

    __tablename__ = "acordo_transacoes"
    __table_args__ = (
        UniqueConstraint("acordo_id", name="uq_acordo_transacoes_acordo"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    acordo_id: Mapped[UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
    )
    custas_advocaticias: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2),
        nullable=True,
    )
    custas_data_vencimento: Mapped[date | None] = mapped_column(Date, nullable=True)
    custas_data_pagamento: Mapped[date | None] = mapped_column(Date, nullable=True)
    honorarios_valor: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2),
        nullable=True,
    )

    acordo: Mapped[Any] = relationship("Acordo", back_populates="transacao")


class AcordoHonorarios(Base):
    """Legal costs and attorney fees of a compensacao or dacao agreement.

    Unlike exceptional transactions, these amounts are tracked separately
    and never gate agreement fulfillment.
    """

    __tablename__ = "acordo_honorarios"
    __table_args__ = (
        UniqueConstraint("acordo_id", name="uq_acordo_honorarios_acordo"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    acordo_id: Mapped[UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
    )
    custas_advocaticias: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2),
        nullable=True,
    )
    custas_data_vencimento: Mapped[date | None] = mapped_column(Date, nullable=True)
    honorarios_valor: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2),
        nullable=True,
    )
    honorarios_data_vencimento: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )
    honorarios_data_pagamento: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    acordo: Mapped[Any] = relationship("Acordo", back_populates="honorarios")


class AcordoDetalhe(Base):
    """Asset or credit offered to settle a dacao or compensacao agreement."""

    __tablename__ = "acordo_detalhes"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    acordo_id: Mapped[UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
    )
    tipo: Mapped[TipoDetalhe] = mapped_column(
        Enum(
            TipoDetalhe,
            name="tipo_detalhe",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    descricao: Mapped[str] = mapped_column(String(280), nullable=False)
    valor: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[DetalheStatus] = mapped_column(
        Enum(
            DetalheStatus,
            name="detalhe_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=DetalheStatus.PENDENTE,
    )
    data_execucao: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)

    acordo: Mapped[Any] = relationship("Acordo", back_populates="detalhes")
    inscricoes: Mapped[list[Any]] = relationship(
        "AcordoInscricao",
        back_populates="detalhe",
    )


class AcordoInscricao(Base):
    """Tax-roll registration settled by an agreement."""

    __tablename__ = "acordo_inscricoes"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    acordo_id: Mapped[UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
    )
    acordo_detalhe_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("acordo_detalhes.id", ondelete="SET NULL"),
        nullable=True,
    )
    numero_inscricao: Mapped[str] = mapped_column(String(60), nullable=False)
    tipo_inscricao: Mapped[TipoInscricao] = mapped_column(
        Enum(
            TipoInscricao,
            name="tipo_inscricao",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    valor_debito: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    situacao: Mapped[SituacaoInscricao] = mapped_column(
        Enum(
            SituacaoInscricao,
            name="situacao_inscricao",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=SituacaoInscricao.PENDENTE,
    )

    acordo: Mapped[Any] = relationship("Acordo", back_populates="inscricoes")
    detalhe: Mapped[Any] = relationship("AcordoDetalhe", back_populates="inscricoes")
