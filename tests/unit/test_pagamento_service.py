from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus, AcordoTransacao
from conciliacao_fiscal.db.models.historico import TipoHistorico
from conciliacao_fiscal.db.models.parcela import (
    FormaPagamento,
    PagamentoParcela,
    Parcela,
    ParcelaStatus,
    TipoParcela,
)
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus, TipoProcesso
from conciliacao_fiscal.domain.errors import InvalidRequestError, InvalidStateError
from conciliacao_fiscal.domain.services.settlement_rules import FulfillmentTrigger
from conciliacao_fiscal.services.acordo_completion import AcordoCompletion
from conciliacao_fiscal.services.pagamento_service import (
    PagamentoService,
    RegisterPaymentInput,
)


class FakeSession:
    def __init__(self) -> None:
        self.committed = False
        self.rolled_back = False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True

    def refresh(self, instance: object) -> None:
        _ = instance


@dataclass
class FakeParcelaRepository:
    parcelas: dict[UUID, Parcela]
    pagamentos: list[PagamentoParcela] = field(default_factory=list)

    def get_for_update(self, parcela_id: UUID) -> Parcela | None:
        return self.parcelas.get(parcela_id)

    def list_for_acordo(self, acordo_id: UUID) -> list[Parcela]:
        return [
            parcela
            for parcela in self.parcelas.values()
            if parcela.acordo_id == acordo_id
        ]

    def get_total_pago(self, parcela_id: UUID) -> Decimal:
        return sum(
            (item.valor_pago for item in self.pagamentos if item.parcela_id == parcela_id),
            Decimal("0.00"),
        )

    def add_pagamento(self, pagamento: PagamentoParcela) -> PagamentoParcela:
        pagamento.id = uuid4()
        self.pagamentos.append(pagamento)
        return pagamento

    def flush(self) -> None:
        return None


@dataclass
class FakeAcordoRepository:
    acordo: Acordo
    transacao: AcordoTransacao | None = None

    def get_for_update(self, acordo_id: UUID) -> Acordo | None:
        return self.acordo if self.acordo.id == acordo_id else None

    def get_transacao(self, acordo_id: UUID) -> AcordoTransacao | None:
        _ = acordo_id
        return self.transacao


@dataclass
class FakeProcessoRepository:
    processo: Processo

    def get_for_update(self, processo_id: UUID) -> Processo | None:
        return self.processo if self.processo.id == processo_id else None


@dataclass
class FakeAuditRepository:
    historicos: list[dict[str, Any]] = field(default_factory=list)
    logs: list[dict[str, Any]] = field(default_factory=list)

    def add_historico(self, **kwargs: Any) -> None:
        self.historicos.append(kwargs)

    def add_log(self, **kwargs: Any) -> None:
        self.logs.append(kwargs)


@dataclass
class Scenario:
    service: PagamentoService
    session: FakeSession
    acordo: Acordo
    processo: Processo
    parcelas: list[Parcela]
    parcela_repository: FakeParcelaRepository
    audit_repository: FakeAuditRepository


def build_scenario(
    *valores: str,
    acordo_status: AcordoStatus = AcordoStatus.ATIVO,
) -> Scenario:
    processo = Processo(
        id=uuid4(),
        numero="PAF-0001/2026",
        tipo=TipoProcesso.TRANSACAO_EXCEPCIONAL,
        status=ProcessoStatus.EM_CUMPRIMENTO,
        valor_original=Decimal("1500.00"),
        contribuinte_id=uuid4(),
    )
    acordo = Acordo(
        id=uuid4(),
        processo_id=processo.id,
        numero_termo="0001/2026",
        valor_final=Decimal("1500.00"),
        status=acordo_status,
    )
    parcelas = [
        Parcela(
            id=uuid4(),
            acordo_id=acordo.id,
            tipo_parcela=TipoParcela.PARCELA_ACORDO,
            numero=numero,
            valor=Decimal(valor),
            status=ParcelaStatus.PENDENTE,
            data_vencimento=date(2030, numero, 10),
        )
        for numero, valor in enumerate(valores, start=1)
    ]
    parcela_repository = FakeParcelaRepository(
        parcelas={parcela.id: parcela for parcela in parcelas}
    )
    acordo_repository = FakeAcordoRepository(acordo=acordo)
    audit_repository = FakeAuditRepository()
    session = FakeSession()
    completion = AcordoCompletion(
        acordo_repository=acordo_repository,  # type: ignore[arg-type]
        parcela_repository=parcela_repository,  # type: ignore[arg-type]
        processo_repository=FakeProcessoRepository(processo),  # type: ignore[arg-type]
        audit_repository=audit_repository,  # type: ignore[arg-type]
    )
    service = PagamentoService(
        parcela_repository=parcela_repository,  # type: ignore[arg-type]
        acordo_repository=acordo_repository,  # type: ignore[arg-type]
        audit_repository=audit_repository,  # type: ignore[arg-type]
        completion=completion,
        session=session,
    )
    return Scenario(
        service=service,
        session=session,
        acordo=acordo,
        processo=processo,
        parcelas=parcelas,
        parcela_repository=parcela_repository,
        audit_repository=audit_repository,
    )


def pay(
    scenario: Scenario,
    parcela: Parcela,
    valor: str,
    trigger: FulfillmentTrigger = FulfillmentTrigger.PAGAMENTO,
) -> Any:
    return scenario.service.register_payment(
        RegisterPaymentInput(
            parcela_id=parcela.id,
            valor_pago=Decimal(valor),
            forma_pagamento=FormaPagamento.PIX,
            data_pagamento=date(2026, 2, 1),
            usuario_id="func-1",
            trigger=trigger,
        )
    )


def test_partial_then_full_payment_updates_installment_status() -> None:
    scenario = build_scenario("1000.00", "500.00")
    parcela = scenario.parcelas[0]

    first = pay(scenario, parcela, "600.00")
    assert first.parcela.status == ParcelaStatus.PENDENTE
    assert first.valor_restante == Decimal("400.00")
    assert first.acordo_cumprido is False

    second = pay(scenario, parcela, "400.00")
    assert second.parcela.status == ParcelaStatus.PAGO
    assert second.parcela.data_pagamento == date(2026, 2, 1)
    assert second.valor_restante == Decimal("0.00")
    assert scenario.acordo.status == AcordoStatus.ATIVO
    assert scenario.session.committed is True


def test_payment_above_remaining_balance_is_rejected() -> None:
    scenario = build_scenario("1000.00", "500.00")

    with pytest.raises(InvalidRequestError) as exc_info:
        pay(scenario, scenario.parcelas[1], "500.01")

    assert "R$ 500.00" in exc_info.value.message
    assert exc_info.value.details == {"valor_restante": "500.00"}
    assert scenario.parcela_repository.pagamentos == []
    assert scenario.session.rolled_back is True
    assert scenario.session.committed is False


def test_non_positive_payment_is_rejected() -> None:
    scenario = build_scenario("1000.00")

    with pytest.raises(InvalidRequestError):
        pay(scenario, scenario.parcelas[0], "0.00")


def test_payment_on_inactive_agreement_is_rejected() -> None:
    scenario = build_scenario("1000.00", acordo_status=AcordoStatus.CANCELADO)

    with pytest.raises(InvalidStateError):
        pay(scenario, scenario.parcelas[0], "100.00")

    assert scenario.session.rolled_back is True


def test_last_payment_completes_agreement_and_case_once() -> None:
    scenario = build_scenario("1000.00", "500.00")
    scenario.parcelas[0].status = ParcelaStatus.PAGO

    result = pay(scenario, scenario.parcelas[1], "500.00")

    assert result.acordo_cumprido is True
    assert scenario.acordo.status == AcordoStatus.CUMPRIDO
    assert scenario.processo.status == ProcessoStatus.CONCLUIDO
    assert len(scenario.audit_repository.historicos) == 1
    historico = scenario.audit_repository.historicos[0]
    assert historico["titulo"] == "Acordo de Pagamento Cumprido"
    assert historico["tipo"] == TipoHistorico.ACORDO


def test_installment_route_trigger_moves_case_to_acordo_firmado() -> None:
    scenario = build_scenario("300.00")

    pay(
        scenario,
        scenario.parcelas[0],
        "300.00",
        trigger=FulfillmentTrigger.PAGAMENTO_PARCELA,
    )

    assert scenario.acordo.status == AcordoStatus.CUMPRIDO
    assert scenario.processo.status == ProcessoStatus.ACORDO_FIRMADO
