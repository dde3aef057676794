"""Panel decision and vote ORM models."""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conciliacao_fiscal.db.base import Base


class TipoResultado(enum.StrEnum):
    """Outcome of a case in a judgment session."""

    SUSPENSO = "SUSPENSO"
    PEDIDO_VISTA = "PEDIDO_VISTA"
    PEDIDO_DILIGENCIA = "PEDIDO_DILIGENCIA"
    JULGADO = "JULGADO"


class TipoDecisao(enum.StrEnum):
    """Merit of a judged case."""

    DEFERIDO = "DEFERIDO"
    INDEFERIDO = "INDEFERIDO"
    PARCIAL = "PARCIAL"


class TipoVoto(enum.StrEnum):
    """Role of the voter in the panel."""

    RELATOR = "RELATOR"
    REVISOR = "REVISOR"
    CONSELHEIRO = "CONSELHEIRO"


class PosicaoVoto(enum.StrEnum):
    """Position taken by a voter."""

    DEFERIDO = "DEFERIDO"
    INDEFERIDO = "INDEFERIDO"
    PARCIAL = "PARCIAL"
    ABSTENCAO = "ABSTENCAO"
    AUSENTE = "AUSENTE"
    IMPEDIDO = "IMPEDIDO"


class Decisao(Base):
    """Decision taken for one case in one judgment session."""

    __tablename__ = "decisoes"
    __table_args__ = (
        UniqueConstraint(
            "sessao_id",
            "processo_id",
            name="uq_decisoes_sessao_processo",
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    sessao_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessoes_julgamento.id"),
        nullable=False,
    )
    processo_id: Mapped[UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
    )
    tipo_resultado: Mapped[TipoResultado] = mapped_column(
        Enum(
            TipoResultado,
            name="tipo_resultado",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    tipo_decisao: Mapped[TipoDecisao | None] = mapped_column(
        Enum(
            TipoDecisao,
            name="tipo_decisao",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=True,
    )
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)
    conselheiro_pedido_vista: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    prazo_vista: Mapped[date | None] = mapped_column(Date, nullable=True)
    especificacao_diligencia: Mapped[str | None] = mapped_column(Text, nullable=True)
    prazo_diligencia: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    processo: Mapped[Any] = relationship("Processo", back_populates="decisoes")
    votos: Mapped[list[Any]] = relationship(
        "Voto",
        back_populates="decisao",
        cascade="all, delete-orphan",
        order_by="Voto.ordem_apresentacao",
    )


class Voto(Base):
    """Individual vote cast on a decision."""

    __tablename__ = "votos"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    decisao_id: Mapped[UUID] = mapped_column(
        ForeignKey("decisoes.id", ondelete="CASCADE"),
        nullable=False,
    )
    tipo_voto: Mapped[TipoVoto] = mapped_column(
        Enum(
            TipoVoto,
            name="tipo_voto",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    nome_votante: Mapped[str] = mapped_column(String(200), nullable=False)
    posicao_voto: Mapped[PosicaoVoto | None] = mapped_column(
        Enum(
            PosicaoVoto,
            name="posicao_voto",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=True,
    )
    texto_voto: Mapped[str | None] = mapped_column(Text, nullable=True)
    ordem_apresentacao: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_presidente: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    decisao: Mapped[Any] = relationship("Decisao", back_populates="votos")
