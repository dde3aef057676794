"""Docket, docket entry and judgment session ORM models."""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conciliacao_fiscal.db.base import Base


class PautaStatus(enum.StrEnum):
    """Docket lifecycle states."""

    ABERTA = "aberta"
    FECHADA = "fechada"


class Pauta(Base):
    """Ordered docket of cases scheduled for one judgment date."""

    __tablename__ = "pautas"
    __table_args__ = (UniqueConstraint("numero", name="uq_pautas_numero"),)

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    numero: Mapped[str] = mapped_column(String(40), nullable=False)
    data_pauta: Mapped[date] = mapped_column(Date, nullable=False)
    descricao: Mapped[str | None] = mapped_column(String(280), nullable=True)
    status: Mapped[PautaStatus] = mapped_column(
        Enum(
            PautaStatus,
            name="pauta_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=PautaStatus.ABERTA,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    processos: Mapped[list[Any]] = relationship(
        "ProcessoPauta",
        back_populates="pauta",
        order_by="ProcessoPauta.ordem",
    )
    sessao: Mapped[Any] = relationship(
        "SessaoJulgamento",
        back_populates="pauta",
        uselist=False,
    )


class ProcessoPauta(Base):
    """Case slot inside a docket with rapporteur and reviewers."""

    __tablename__ = "processos_pauta"
    __table_args__ = (
        UniqueConstraint(
            "pauta_id",
            "processo_id",
            name="uq_processos_pauta_pauta_processo",
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pauta_id: Mapped[UUID] = mapped_column(
        ForeignKey("pautas.id", ondelete="CASCADE"),
        nullable=False,
    )
    processo_id: Mapped[UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
    )
    ordem: Mapped[int] = mapped_column(Integer, nullable=False)
    relator: Mapped[str | None] = mapped_column(String(200), nullable=True)
    revisores: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list,
    )
    status_sessao: Mapped[str | None] = mapped_column(String(40), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    pauta: Mapped[Any] = relationship("Pauta", back_populates="processos")
    processo: Mapped[Any] = relationship("Processo")


class SessaoJulgamento(Base):
    """Judgment session held over exactly one docket."""

    __tablename__ = "sessoes_julgamento"
    __table_args__ = (
        UniqueConstraint("pauta_id", name="uq_sessoes_julgamento_pauta"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pauta_id: Mapped[UUID] = mapped_column(
        ForeignKey("pautas.id"),
        nullable=False,
    )
    data_inicio: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    data_fim: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    presidente: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    pauta: Mapped[Any] = relationship("Pauta", back_populates="sessao")
