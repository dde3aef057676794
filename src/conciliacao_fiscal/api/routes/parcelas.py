"""Installment routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from conciliacao_fiscal.api.auth import WriterUser
from conciliacao_fiscal.api.dependencies import (
    get_pagamento_service,
    get_parcela_service,
)
from conciliacao_fiscal.api.routes.pagamentos import build_payment_response
from conciliacao_fiscal.api.schemas.parcelas import (
    PagamentoResponse,
    ParcelaResponse,
    PaymentResponse,
    RegisterParcelaPaymentRequest,
    UpdateParcelaRequest,
    UpdateParcelaResponse,
)
from conciliacao_fiscal.domain.dates import today_local
from conciliacao_fiscal.domain.services.settlement_rules import FulfillmentTrigger
from conciliacao_fiscal.services.pagamento_service import (
    PagamentoService,
    RegisterPaymentInput,
)
from conciliacao_fiscal.services.parcela_service import (
    ParcelaService,
    UpdateParcelaInput,
)

router = APIRouter(prefix="/parcelas", tags=["Parcelas"])


@router.post(
    "/{parcela_id}/pagamento",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Valor invalido ou acordo fora de vigencia"},
        404: {"description": "Parcela nao encontrada"},
    },
)
def register_parcela_payment(
    parcela_id: UUID,
    payload: RegisterParcelaPaymentRequest,
    user: WriterUser,
    service: Annotated[PagamentoService, Depends(get_pagamento_service)],
) -> PaymentResponse:
    """Register a payment on the installment in the path."""

    result = service.register_payment(
        RegisterPaymentInput(
            parcela_id=parcela_id,
            valor_pago=payload.valor_pago,
            forma_pagamento=payload.forma_pagamento,
            data_pagamento=payload.data_pagamento or today_local(),
            usuario_id=user.user_id,
            trigger=FulfillmentTrigger.PAGAMENTO_PARCELA,
            numero_comprovante=payload.numero_comprovante,
            observacoes=payload.observacoes,
        )
    )
    return build_payment_response(result)


@router.put(
    "/{parcela_id}",
    response_model=UpdateParcelaResponse,
    responses={
        400: {"description": "Transicao de status invalida"},
        404: {"description": "Parcela nao encontrada"},
    },
)
def update_parcela(
    parcela_id: UUID,
    payload: UpdateParcelaRequest,
    user: WriterUser,
    service: Annotated[ParcelaService, Depends(get_parcela_service)],
) -> UpdateParcelaResponse:
    """Adjust due date and status of an installment."""

    result = service.update_parcela(
        UpdateParcelaInput(
            parcela_id=parcela_id,
            data_vencimento=payload.data_vencimento,
            status=payload.status,
            usuario_id=user.user_id,
            data_pagamento=payload.data_pagamento,
        )
    )
    return UpdateParcelaResponse(
        message="Parcela atualizada com sucesso.",
        parcela=ParcelaResponse.from_model(result.parcela),
        pagamento_complementar=(
            PagamentoResponse.from_model(result.pagamento_complementar)
            if result.pagamento_complementar is not None
            else None
        ),
        acordo_cumprido=result.acordo_cumprido,
    )
