"""Append-only case history and audit log ORM models."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from conciliacao_fiscal.db.base import Base


class TipoHistorico(enum.StrEnum):
    """Categories of case history entries."""

    ALTERACAO = "ALTERACAO"
    DECISAO = "DECISAO"
    PAUTA = "PAUTA"
    ACORDO = "ACORDO"
    ACORDO_CONCLUIDO = "ACORDO_CONCLUIDO"
    PROCESSO_CONCLUIDO = "PROCESSO_CONCLUIDO"


class HistoricoProcesso(Base):
    """Human-readable event appended to a case timeline."""

    __tablename__ = "historicos_processo"
    __table_args__ = (
        Index("ix_historicos_processo_processo_created", "processo_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    processo_id: Mapped[UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
    )
    usuario_id: Mapped[str] = mapped_column(String(120), nullable=False)
    titulo: Mapped[str] = mapped_column(String(200), nullable=False)
    descricao: Mapped[str] = mapped_column(Text, nullable=False)
    tipo: Mapped[TipoHistorico] = mapped_column(
        Enum(
            TipoHistorico,
            name="tipo_historico",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class LogAuditoria(Base):
    """Audit row written for every mutation."""

    __tablename__ = "logs_auditoria"
    __table_args__ = (
        Index("ix_logs_auditoria_entidade", "entidade", "entidade_id"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    usuario_id: Mapped[str] = mapped_column(String(120), nullable=False)
    acao: Mapped[str] = mapped_column(String(60), nullable=False)
    entidade: Mapped[str] = mapped_column(String(60), nullable=False)
    entidade_id: Mapped[str] = mapped_column(String(64), nullable=False)
    dados_anteriores: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=True,
    )
    dados_novos: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
