"""Payment registration routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from conciliacao_fiscal.api.auth import WriterUser
from conciliacao_fiscal.api.dependencies import get_pagamento_service
from conciliacao_fiscal.api.schemas.parcelas import (
    PagamentoResponse,
    ParcelaResponse,
    PaymentResponse,
    RegisterPaymentRequest,
)
from conciliacao_fiscal.domain.services.settlement_rules import FulfillmentTrigger
from conciliacao_fiscal.services.pagamento_service import (
    PagamentoService,
    PaymentResult,
    RegisterPaymentInput,
)

router = APIRouter(prefix="/pagamentos", tags=["Pagamentos"])


def build_payment_response(result: PaymentResult) -> PaymentResponse:
    message = "Pagamento registrado com sucesso."
    if result.acordo_cumprido:
        message = "Pagamento registrado. Acordo cumprido."
    return PaymentResponse(
        message=message,
        pagamento=PagamentoResponse.from_model(result.pagamento),
        parcela=ParcelaResponse.from_model(
            result.parcela,
            total_pago=result.total_pago,
            valor_restante=result.valor_restante,
        ),
        acordo_cumprido=result.acordo_cumprido,
    )


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Valor invalido ou acordo fora de vigencia"},
        401: {"description": "Sessao ausente"},
        403: {"description": "Perfil sem permissao"},
        404: {"description": "Parcela nao encontrada"},
    },
)
def register_payment(
    payload: RegisterPaymentRequest,
    user: WriterUser,
    service: Annotated[PagamentoService, Depends(get_pagamento_service)],
) -> PaymentResponse:
    """Register a payment on any installment of an active agreement."""

    result = service.register_payment(
        RegisterPaymentInput(
            parcela_id=payload.parcela_id,
            valor_pago=payload.valor_pago,
            forma_pagamento=payload.forma_pagamento,
            data_pagamento=payload.data_pagamento,
            usuario_id=user.user_id,
            trigger=FulfillmentTrigger.PAGAMENTO,
            numero_comprovante=payload.numero_comprovante,
            observacoes=payload.observacoes,
        )
    )
    return build_payment_response(result)
