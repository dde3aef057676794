"""API v1 router registration."""

from fastapi import APIRouter

from conciliacao_fiscal.api.routes import (
    acordos,
    julgamento,
    pagamentos,
    parcelas,
    processos,
)

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(processos.router)
v1_router.include_router(julgamento.pautas_router)
v1_router.include_router(julgamento.sessoes_router)
v1_router.include_router(acordos.router)
v1_router.include_router(parcelas.router)
v1_router.include_router(pagamentos.router)
