"""Manual installment adjustments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from conciliacao_fiscal.db.models.parcela import (
    FormaPagamento,
    PagamentoParcela,
    Parcela,
    ParcelaStatus,
)
from conciliacao_fiscal.domain.errors import (
    InvalidRequestError,
    InvalidStateError,
    compose_error_message,
)
from conciliacao_fiscal.domain.money import ZERO, format_money
from conciliacao_fiscal.domain.services.settlement_rules import (
    FulfillmentTrigger,
    remaining_balance,
)
from conciliacao_fiscal.services.acordo_completion import (
    AcordoCompletion,
    parcela_snapshot,
)
from conciliacao_fiscal.services.pagamento_service import load_payable_parcela
from conciliacao_fiscal.services.ports import (
    AcordoRepositoryProtocol,
    AuditRepositoryProtocol,
    ParcelaRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)

AJUSTE_MANUAL_OBSERVACAO = "Pagamento complementar gerado por ajuste manual da parcela."


@dataclass(slots=True, frozen=True)
class UpdateParcelaInput:
    """Input model for a manual installment adjustment."""

    parcela_id: UUID
    data_vencimento: date
    status: ParcelaStatus
    usuario_id: str
    data_pagamento: date | None = None


@dataclass(slots=True, frozen=True)
class UpdateParcelaResult:
    """Outcome of an installment adjustment."""

    parcela: Parcela
    pagamento_complementar: PagamentoParcela | None
    acordo_cumprido: bool


class ParcelaService:
    """Applies manual installment edits through the shared cascade."""

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

    def update_parcela(self, payload: UpdateParcelaInput) -> UpdateParcelaResult:
        """Edit due date and status, covering any shortfall when marking PAGO."""

        try:
            parcela, acordo = load_payable_parcela(
                parcela_id=payload.parcela_id,
                parcela_repository=self._parcela_repository,
                acordo_repository=self._acordo_repository,
            )
            if payload.status == ParcelaStatus.PAGO and payload.data_pagamento is None:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause="Data de pagamento é obrigatória para parcelas pagas.",
                        action="Informe dataPagamento ao marcar a parcela como PAGO.",
                    )
                )
            if (
                parcela.status == ParcelaStatus.PAGO
                and payload.status != ParcelaStatus.PAGO
            ):
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="A parcela já está paga e possui pagamentos registrados.",
                        action="Parcelas pagas não podem voltar a ficar em aberto.",
                    ),
                    details={"parcela_id": str(parcela.id)},
                )

            before = parcela_snapshot(parcela)
            pagamento_complementar: PagamentoParcela | None = None
            if (
                payload.status == ParcelaStatus.PAGO
                and parcela.status != ParcelaStatus.PAGO
                and payload.data_pagamento is not None
            ):
                total_pago = self._parcela_repository.get_total_pago(parcela.id)
                shortfall = remaining_balance(parcela.valor, total_pago)
                if shortfall > ZERO:
                    pagamento_complementar = self._parcela_repository.add_pagamento(
                        PagamentoParcela(
                            parcela_id=parcela.id,
                            valor_pago=shortfall,
                            data_pagamento=payload.data_pagamento,
                            forma_pagamento=FormaPagamento.DINHEIRO,
                            observacoes=AJUSTE_MANUAL_OBSERVACAO,
                            usuario_id=payload.usuario_id,
                        )
                    )

            parcela.data_vencimento = payload.data_vencimento
            parcela.status = payload.status
            parcela.data_pagamento = (
                payload.data_pagamento if payload.status == ParcelaStatus.PAGO else None
            )
            self._parcela_repository.flush()

            acordo_cumprido = self._completion.complete_if_fulfilled(
                acordo=acordo,
                trigger=FulfillmentTrigger.AJUSTE_PARCELA,
                usuario_id=payload.usuario_id,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="UPDATE",
                entidade="Parcela",
                entidade_id=str(parcela.id),
                dados_anteriores=before,
                dados_novos=parcela_snapshot(parcela),
            )

            self._session.commit()
            self._session.refresh(parcela)
            logger.info(
                "parcela_atualizada",
                extra={
                    "parcela_id": str(parcela.id),
                    "status": parcela.status.value,
                    "pagamento_complementar": (
                        format_money(pagamento_complementar.valor_pago)
                        if pagamento_complementar
                        else None
                    ),
                    "acordo_cumprido": acordo_cumprido,
                },
            )
            return UpdateParcelaResult(
                parcela=parcela,
                pagamento_complementar=pagamento_complementar,
                acordo_cumprido=acordo_cumprido,
            )
        except Exception:
            self._session.rollback()
            raise
