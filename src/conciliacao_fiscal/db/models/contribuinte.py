"""Taxpayer ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conciliacao_fiscal.db.base import Base


class Contribuinte(Base):
    """Taxpayer that owns one or more administrative cases."""

    __tablename__ = "contribuintes"
    __table_args__ = (
        UniqueConstraint("documento", name="uq_contribuintes_documento"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    documento: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    telefone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    processos: Mapped[list[Any]] = relationship(
        "Processo",
        back_populates="contribuinte",
    )
