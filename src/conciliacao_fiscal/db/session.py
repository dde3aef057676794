"""SQLAlchemy engine and session factory definitions."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from conciliacao_fiscal.core.settings import get_settings


def build_engine(database_url: str, *, app_timezone: str) -> Engine:
    """Create the engine, pinning PostgreSQL sessions to the local timezone.

    Due dates and payment dates are local calendar dates, so ``now()``
    defaults must be evaluated in the same zone as ``today_local``.
    """

    connect_args: dict[str, Any] = {}
    if make_url(database_url).get_backend_name() == "postgresql":
        connect_args["options"] = f"-c timezone={app_timezone}"
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


settings = get_settings()

engine = build_engine(settings.database_url, app_timezone=settings.app_timezone)

SessionFactory = sessionmaker(
    bind=engine,
    class_=Session,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_db_session() -> Generator[Session, None, None]:
    """Yield one database session per request; services own the commit."""

    with SessionFactory() as session:
        yield session
