"""SQLAlchemy base metadata and model registration utilities."""

from importlib import import_module

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


def import_orm_models() -> None:
    """Import ORM models so metadata is fully populated."""

    modules = (
        "conciliacao_fiscal.db.models.contribuinte",
        "conciliacao_fiscal.db.models.processo",
        "conciliacao_fiscal.db.models.pauta",
        "conciliacao_fiscal.db.models.decisao",
        "conciliacao_fiscal.db.models.acordo",
        "conciliacao_fiscal.db.models.parcela",
        "conciliacao_fiscal.db.models.historico",
    )
    for module_name in modules:
        import_module(module_name)
