"""API request and response schemas."""

from conciliacao_fiscal.api.schemas.acordos import (
    AcordoDetailResponse,
    AcordoResponse,
    CreateAcordoRequest,
)
from conciliacao_fiscal.api.schemas.parcelas import (
    PaymentResponse,
    RegisterPaymentRequest,
)
from conciliacao_fiscal.api.schemas.processos import (
    CreateProcessoRequest,
    ProcessoResponse,
)

__all__ = [
    "AcordoDetailResponse",
    "AcordoResponse",
    "CreateAcordoRequest",
    "CreateProcessoRequest",
    "PaymentResponse",
    "ProcessoResponse",
    "RegisterPaymentRequest",
]
