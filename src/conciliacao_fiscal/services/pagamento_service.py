"""Payment registration against agreement installments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.parcela import (
    FormaPagamento,
    PagamentoParcela,
    Parcela,
    ParcelaStatus,
)
from conciliacao_fiscal.domain.errors import (
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
    compose_error_message,
)
from conciliacao_fiscal.domain.money import ZERO, format_brl, format_money, quantize_money
from conciliacao_fiscal.domain.services.settlement_rules import (
    FulfillmentTrigger,
    next_parcela_status,
    remaining_balance,
)
from conciliacao_fiscal.services.acordo_completion import AcordoCompletion
from conciliacao_fiscal.services.ports import (
    AcordoRepositoryProtocol,
    AuditRepositoryProtocol,
    ParcelaRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RegisterPaymentInput:
    """Input model for one installment payment."""

    parcela_id: UUID
    valor_pago: Decimal
    forma_pagamento: FormaPagamento
    data_pagamento: date
    usuario_id: str
    trigger: FulfillmentTrigger = FulfillmentTrigger.PAGAMENTO
    numero_comprovante: str | None = None
    observacoes: str | None = None


@dataclass(slots=True, frozen=True)
class PaymentResult:
    """Outcome of a payment registration."""

    pagamento: PagamentoParcela
    parcela: Parcela
    acordo: Acordo
    acordo_cumprido: bool
    total_pago: Decimal = ZERO
    valor_restante: Decimal = ZERO


def load_payable_parcela(
    *,
    parcela_id: UUID,
    parcela_repository: ParcelaRepositoryProtocol,
    acordo_repository: AcordoRepositoryProtocol,
) -> tuple[Parcela, Acordo]:
    """Lock an installment and its agreement, rejecting non-payable states."""

    parcela = parcela_repository.get_for_update(parcela_id)
    if parcela is None:
        raise NotFoundError(
            message=compose_error_message(
                cause="Parcela não encontrada.",
                action="Confira o identificador da parcela.",
            ),
            details={"parcela_id": str(parcela_id)},
        )

    acordo = acordo_repository.get_for_update(parcela.acordo_id)
    if acordo is None:
        raise NotFoundError(
            message=compose_error_message(
                cause="Acordo da parcela não encontrado.",
                action="Verifique a integridade do cadastro do acordo.",
            ),
            details={"acordo_id": str(parcela.acordo_id)},
        )
    if acordo.status != AcordoStatus.ATIVO:
        raise InvalidStateError(
            message=compose_error_message(
                cause=f"O acordo está com status {acordo.status.value}.",
                action="Registre pagamentos apenas em acordos ativos.",
            ),
            details={"acordo_status": acordo.status.value},
        )
    return parcela, acordo


class PagamentoService:
    """Registers payments and cascades installment and agreement status."""

    def __init__(
        self,
        *,
        parcela_repository: ParcelaRepositoryProtocol,
        acordo_repository: AcordoRepositoryProtocol,
        audit_repository: AuditRepositoryProtocol,
        completion: AcordoCompletion,
        session: SessionProtocol,
    ) -> None:
        self._parcela_repository = parcela_repository
        self._acordo_repository = acordo_repository
        self._audit_repository = audit_repository
        self._completion = completion
        self._session = session

    def register_payment(self, payload: RegisterPaymentInput) -> PaymentResult:
        """Record a payment and propagate the resulting statuses atomically."""

        try:
            parcela, acordo = load_payable_parcela(
                parcela_id=payload.parcela_id,
                parcela_repository=self._parcela_repository,
                acordo_repository=self._acordo_repository,
            )
            if parcela.status == ParcelaStatus.CANCELADO:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="A parcela está cancelada.",
                        action="Registre o pagamento em uma parcela em aberto.",
                    ),
                    details={"parcela_id": str(parcela.id)},
                )

            valor_pago = quantize_money(payload.valor_pago)
            if valor_pago <= ZERO:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause="O valor pago deve ser maior que zero.",
                        action="Informe um valor positivo com duas casas decimais.",
                    )
                )

            total_pago = self._parcela_repository.get_total_pago(parcela.id)
            valor_restante = remaining_balance(parcela.valor, total_pago)
            if valor_pago > valor_restante:
                logger.warning(
                    "pagamento_rejeitado",
                    extra={
                        "parcela_id": str(parcela.id),
                        "valor_pago": format_money(valor_pago),
                        "valor_restante": format_money(valor_restante),
                    },
                )
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause=(
                            f"Valor pago ({format_brl(valor_pago)}) excede o valor "
                            f"restante da parcela ({format_brl(valor_restante)})."
                        ),
                        action="Informe um valor menor ou igual ao saldo da parcela.",
                    ),
                    details={"valor_restante": format_money(valor_restante)},
                )

            pagamento = self._parcela_repository.add_pagamento(
                PagamentoParcela(
                    parcela_id=parcela.id,
                    valor_pago=valor_pago,
                    data_pagamento=payload.data_pagamento,
                    forma_pagamento=payload.forma_pagamento,
                    numero_comprovante=payload.numero_comprovante,
                    observacoes=payload.observacoes,
                    usuario_id=payload.usuario_id,
                )
            )

            next_status = next_parcela_status(
                parcela.status,
                total_pago=total_pago + valor_pago,
                valor=parcela.valor,
            )
            if next_status == ParcelaStatus.PAGO and parcela.status != ParcelaStatus.PAGO:
                parcela.data_pagamento = payload.data_pagamento
            parcela.status = next_status
            self._parcela_repository.flush()

            acordo_cumprido = self._completion.complete_if_fulfilled(
                acordo=acordo,
                trigger=payload.trigger,
                usuario_id=payload.usuario_id,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="PagamentoParcela",
                entidade_id=str(pagamento.id),
                dados_novos={
                    "parcela_id": str(parcela.id),
                    "valor_pago": format_money(valor_pago),
                    "forma_pagamento": payload.forma_pagamento.value,
                    "data_pagamento": payload.data_pagamento.isoformat(),
                    "parcela_status": parcela.status.value,
                    "acordo_cumprido": acordo_cumprido,
                },
            )

            self._session.commit()
            self._session.refresh(pagamento)
            self._session.refresh(parcela)
            logger.info(
                "pagamento_registrado",
                extra={
                    "pagamento_id": str(pagamento.id),
                    "parcela_id": str(parcela.id),
                    "acordo_id": str(acordo.id),
                    "valor_pago": format_money(valor_pago),
                    "parcela_status": parcela.status.value,
                    "acordo_cumprido": acordo_cumprido,
                },
            )
            return PaymentResult(
                pagamento=pagamento,
                parcela=parcela,
                acordo=acordo,
                acordo_cumprido=acordo_cumprido,
                total_pago=total_pago + valor_pago,
                valor_restante=valor_restante - valor_pago,
            )
        except Exception:
            self._session.rollback()
            raise
