"""FastAPI app bootstrap for conciliacao_fiscal."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from conciliacao_fiscal.api.error_handlers import register_error_handlers
from conciliacao_fiscal.api.routes import v1_router
from conciliacao_fiscal.core.logging import configure_logging
from conciliacao_fiscal.core.settings import get_settings
from conciliacao_fiscal.db.session import get_db_session


def create_app() -> FastAPI:
    """Create the API for case registry, judgment and agreement settlement."""

    configure_logging(get_settings().log_level)
    app = FastAPI(
        title="Conciliação Fiscal API",
        description=(
            "Processos administrativos fiscais, pautas de julgamento e "
            "acordos de pagamento com parcelas."
        ),
        version="0.1.0",
    )

    @app.get("/health/live", include_in_schema=False)
    def health_live() -> dict[str, str]:
        return {"status": "alive"}

    @app.get("/health/ready", include_in_schema=False)
    def health_ready(
        db_session: Annotated[Session, Depends(get_db_session)],
    ) -> dict[str, str]:
        try:
            db_session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Banco de dados indisponível",
            ) from exc
        return {"status": "ready"}

    register_error_handlers(app)
    app.include_router(v1_router)
    return app


app = create_app()
