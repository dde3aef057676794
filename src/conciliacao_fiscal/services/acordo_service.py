"""Settlement agreement lifecycle service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from conciliacao_fiscal.db.models.acordo import (
    Acordo,
    AcordoDetalhe,
    AcordoHonorarios,
    AcordoInscricao,
    AcordoStatus,
    AcordoTransacao,
    DetalheStatus,
    SituacaoInscricao,
    TipoDetalhe,
    TipoInscricao,
)
from conciliacao_fiscal.db.models.decisao import TipoDecisao
from conciliacao_fiscal.db.models.historico import TipoHistorico
from conciliacao_fiscal.db.models.parcela import PagamentoParcela, Parcela, ParcelaStatus
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus, TipoProcesso
from conciliacao_fiscal.domain.dates import now_local
from conciliacao_fiscal.domain.errors import (
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
    compose_error_message,
)
from conciliacao_fiscal.domain.installment_schedule import build_schedule
from conciliacao_fiscal.domain.money import ZERO, format_money, quantize_money
from conciliacao_fiscal.domain.services.processo_lifecycle import (
    ensure_transition_allowed,
)
from conciliacao_fiscal.domain.services.settlement_rules import (
    OPEN_PARCELA_STATUSES,
    FulfillmentTrigger,
    remaining_balance,
)
from conciliacao_fiscal.services.acordo_completion import (
    AcordoCompletion,
    acordo_snapshot,
)
from conciliacao_fiscal.services.ports import (
    AcordoRepositoryProtocol,
    AuditRepositoryProtocol,
    ParcelaRepositoryProtocol,
    ProcessoRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)

DIRECTLY_CONCLUDABLE_TYPES = frozenset(
    {TipoProcesso.COMPENSACAO, TipoProcesso.DACAO_PAGAMENTO}
)
SETTLEABLE_DECISIONS = frozenset({TipoDecisao.DEFERIDO, TipoDecisao.PARCIAL})
CANCELLABLE_STATUSES = frozenset({AcordoStatus.ATIVO, AcordoStatus.VENCIDO})


@dataclass(slots=True, frozen=True)
class InscricaoInput:
    """Tax-roll registration settled by an agreement component."""

    numero_inscricao: str
    tipo_inscricao: TipoInscricao
    valor_debito: Decimal


@dataclass(slots=True, frozen=True)
class DetalheInput:
    """Asset or credit component of a dacao or compensacao agreement."""

    tipo: TipoDetalhe
    descricao: str
    valor: Decimal
    inscricoes: tuple[InscricaoInput, ...] = ()


@dataclass(slots=True, frozen=True)
class CreateAcordoInput:
    """Input model for agreement creation."""

    processo_id: UUID
    valor_total: Decimal
    valor_final: Decimal
    numero_parcelas: int
    data_assinatura: date
    data_vencimento: date
    usuario_id: str
    valor_desconto: Decimal = Decimal("0.00")
    valor_entrada: Decimal = Decimal("0.00")
    observacoes: str | None = None
    custas_advocaticias: Decimal | None = None
    custas_data_vencimento: date | None = None
    honorarios_valor: Decimal | None = None
    honorarios_data_vencimento: date | None = None
    detalhes: tuple[DetalheInput, ...] = ()


@dataclass(slots=True, frozen=True)
class ConcludeAcordoInput:
    """Input model for direct conclusion of dacao/compensacao agreements."""

    acordo_id: UUID
    usuario_id: str
    atualizar_processo: bool = False
    observacoes: str | None = None


@dataclass(slots=True, frozen=True)
class UpdateDetalheInput:
    """Input model for an agreement component status change."""

    acordo_id: UUID
    detalhe_id: UUID
    status: DetalheStatus
    usuario_id: str
    observacoes: str | None = None


@dataclass(slots=True, frozen=True)
class UpdateCustasInput:
    """Input model for legal cost settlement."""

    acordo_id: UUID
    usuario_id: str
    custas_data_vencimento: date | None = None
    custas_data_pagamento: date | None = None


@dataclass(slots=True, frozen=True)
class UpdateHonorariosInput:
    """Input model for attorney fee dates of compensacao and dacao agreements."""

    acordo_id: UUID
    usuario_id: str
    honorarios_data_vencimento: date
    honorarios_data_pagamento: date | None = None


@dataclass(slots=True, frozen=True)
class CancelAcordoInput:
    """Input model for agreement cancellation."""

    acordo_id: UUID
    usuario_id: str
    motivo: str | None = None


@dataclass(slots=True)
class ParcelaView:
    """Installment with its payments and paid total."""

    parcela: Parcela
    total_pago: Decimal
    valor_restante: Decimal
    pagamentos: list[PagamentoParcela] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class AcordoResumo:
    """Computed financial summary of an agreement."""

    total_pago: Decimal
    valor_restante: Decimal
    percentual_pago: Decimal
    parcelas_pagas: int
    parcelas_pendentes: int
    parcelas_atrasadas: int


@dataclass(slots=True)
class AcordoView:
    """Agreement read model with installments and summary."""

    acordo: Acordo
    parcelas: list[ParcelaView]
    resumo: AcordoResumo
    transacao: AcordoTransacao | None = None
    honorarios: AcordoHonorarios | None = None
    detalhes: list[AcordoDetalhe] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class DetalheResult:
    """Outcome of a component status change."""

    detalhe: AcordoDetalhe
    acordo: Acordo
    acordo_cumprido: bool


@dataclass(slots=True, frozen=True)
class CustasResult:
    """Outcome of a legal cost update."""

    transacao: AcordoTransacao
    acordo: Acordo
    acordo_cumprido: bool


def _acordo_not_found(acordo_id: UUID) -> NotFoundError:
    return NotFoundError(
        message=compose_error_message(
            cause="Acordo não encontrado.",
            action="Confira o identificador do acordo.",
        ),
        details={"acordo_id": str(acordo_id)},
    )


def _processo_not_found(processo_id: UUID) -> NotFoundError:
    return NotFoundError(
        message=compose_error_message(
            cause="Processo não encontrado.",
            action="Confira o identificador do processo.",
        ),
        details={"processo_id": str(processo_id)},
    )


def _ensure_acordo_ativo(acordo: Acordo, *, action: str) -> None:
    if acordo.status == AcordoStatus.ATIVO:
        return
    raise InvalidStateError(
        message=compose_error_message(
            cause=f"O acordo está com status {acordo.status.value}.",
            action=action,
        ),
        details={"acordo_status": acordo.status.value},
    )


class AcordoService:
    """Coordinates agreement creation, reading and closure use cases."""

    def __init__(
        self,
        *,
        acordo_repository: AcordoRepositoryProtocol,
        parcela_repository: ParcelaRepositoryProtocol,
        processo_repository: ProcessoRepositoryProtocol,
        audit_repository: AuditRepositoryProtocol,
        completion: AcordoCompletion,
        session: SessionProtocol,
    ) -> None:
        self._acordo_repository = acordo_repository
        self._parcela_repository = parcela_repository
        self._processo_repository = processo_repository
        self._audit_repository = audit_repository
        self._completion = completion
        self._session = session

    def create_acordo(self, payload: CreateAcordoInput) -> Acordo:
        """Create an agreement for a favorably judged case with its schedule."""

        try:
            processo = self._processo_repository.get_for_update(payload.processo_id)
            if processo is None:
                raise _processo_not_found(payload.processo_id)
            self._ensure_settleable(processo)
            self._validate_values(payload, processo)

            valor_final = quantize_money(payload.valor_final)
            valor_entrada = quantize_money(payload.valor_entrada)
            try:
                schedule = build_schedule(
                    valor_final=valor_final,
                    valor_entrada=valor_entrada,
                    numero_parcelas=payload.numero_parcelas,
                    data_vencimento=payload.data_vencimento,
                )
            except ValueError as exc:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause=str(exc),
                        action="Revise valores e número de parcelas do acordo.",
                    )
                ) from exc

            acordo = Acordo(
                processo_id=processo.id,
                numero_termo=self._acordo_repository.next_numero_termo(
                    payload.data_assinatura.year
                ),
                valor_total=quantize_money(payload.valor_total),
                valor_desconto=quantize_money(payload.valor_desconto),
                valor_entrada=valor_entrada,
                valor_final=valor_final,
                numero_parcelas=payload.numero_parcelas,
                data_assinatura=payload.data_assinatura,
                data_vencimento=payload.data_vencimento,
                status=AcordoStatus.ATIVO,
                observacoes=payload.observacoes,
            )
            self._acordo_repository.add(acordo)

            for item in schedule:
                self._parcela_repository.add(
                    Parcela(
                        acordo_id=acordo.id,
                        tipo_parcela=item.tipo_parcela,
                        numero=item.numero,
                        valor=item.valor,
                        status=ParcelaStatus.PENDENTE,
                        data_vencimento=item.data_vencimento,
                    )
                )

            if processo.tipo == TipoProcesso.TRANSACAO_EXCEPCIONAL:
                self._acordo_repository.add(
                    AcordoTransacao(
                        acordo_id=acordo.id,
                        custas_advocaticias=(
                            quantize_money(payload.custas_advocaticias)
                            if payload.custas_advocaticias is not None
                            else None
                        ),
                        custas_data_vencimento=payload.custas_data_vencimento,
                        honorarios_valor=(
                            quantize_money(payload.honorarios_valor)
                            if payload.honorarios_valor is not None
                            else None
                        ),
                    )
                )
            elif (
                payload.custas_advocaticias is not None
                or payload.honorarios_valor is not None
            ):
                self._acordo_repository.add(
                    AcordoHonorarios(
                        acordo_id=acordo.id,
                        custas_advocaticias=(
                            quantize_money(payload.custas_advocaticias)
                            if payload.custas_advocaticias is not None
                            else None
                        ),
                        custas_data_vencimento=payload.custas_data_vencimento,
                        honorarios_valor=(
                            quantize_money(payload.honorarios_valor)
                            if payload.honorarios_valor is not None
                            else None
                        ),
                        honorarios_data_vencimento=payload.honorarios_data_vencimento,
                    )
                )

            for detalhe_input in payload.detalhes:
                detalhe = AcordoDetalhe(
                    acordo_id=acordo.id,
                    tipo=detalhe_input.tipo,
                    descricao=detalhe_input.descricao.strip(),
                    valor=quantize_money(detalhe_input.valor),
                    status=DetalheStatus.PENDENTE,
                )
                self._acordo_repository.add(detalhe)
                for inscricao_input in detalhe_input.inscricoes:
                    self._acordo_repository.add(
                        AcordoInscricao(
                            acordo_id=acordo.id,
                            acordo_detalhe_id=detalhe.id,
                            numero_inscricao=inscricao_input.numero_inscricao.strip(),
                            tipo_inscricao=inscricao_input.tipo_inscricao,
                            valor_debito=quantize_money(inscricao_input.valor_debito),
                            situacao=SituacaoInscricao.PENDENTE,
                        )
                    )

            ensure_transition_allowed(processo.status, ProcessoStatus.EM_CUMPRIMENTO)
            processo.status = ProcessoStatus.EM_CUMPRIMENTO
            processo.valor_negociado = valor_final

            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo=f"Acordo {acordo.numero_termo} Criado",
                descricao=(
                    f"Acordo firmado no valor de R$ {format_money(valor_final)} "
                    f"em {payload.numero_parcelas} parcela(s)."
                ),
                tipo=TipoHistorico.ACORDO,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="Acordo",
                entidade_id=str(acordo.id),
                dados_novos=acordo_snapshot(acordo),
            )

            self._session.commit()
            self._session.refresh(acordo)
            logger.info(
                "acordo_criado",
                extra={
                    "acordo_id": str(acordo.id),
                    "processo_id": str(processo.id),
                    "numero_termo": acordo.numero_termo,
                    "numero_parcelas": payload.numero_parcelas,
                },
            )
            return acordo
        except Exception:
            self._session.rollback()
            raise

    def get_acordo(self, acordo_id: UUID) -> AcordoView:
        """Return an agreement with installments, payments and summary."""

        acordo = self._acordo_repository.get(acordo_id)
        if acordo is None:
            raise _acordo_not_found(acordo_id)

        parcela_views: list[ParcelaView] = []
        total_pago = ZERO
        valor_restante = ZERO
        counts = {status: 0 for status in ParcelaStatus}
        for parcela in self._parcela_repository.list_for_acordo(acordo.id):
            pagamentos = self._parcela_repository.list_pagamentos(parcela.id)
            pago = quantize_money(
                sum((pagamento.valor_pago for pagamento in pagamentos), ZERO)
            )
            restante = (
                ZERO
                if parcela.status == ParcelaStatus.CANCELADO
                else remaining_balance(parcela.valor, pago)
            )
            total_pago += pago
            valor_restante += restante
            counts[parcela.status] += 1
            parcela_views.append(
                ParcelaView(
                    parcela=parcela,
                    total_pago=pago,
                    valor_restante=restante,
                    pagamentos=pagamentos,
                )
            )

        percentual = (
            quantize_money(total_pago / acordo.valor_final * 100)
            if acordo.valor_final > ZERO
            else ZERO
        )
        return AcordoView(
            acordo=acordo,
            parcelas=parcela_views,
            resumo=AcordoResumo(
                total_pago=quantize_money(total_pago),
                valor_restante=quantize_money(valor_restante),
                percentual_pago=percentual,
                parcelas_pagas=counts[ParcelaStatus.PAGO],
                parcelas_pendentes=counts[ParcelaStatus.PENDENTE],
                parcelas_atrasadas=counts[ParcelaStatus.ATRASADO],
            ),
            transacao=self._acordo_repository.get_transacao(acordo.id),
            honorarios=self._acordo_repository.get_honorarios(acordo.id),
            detalhes=self._acordo_repository.list_detalhes(acordo.id),
        )

    def conclude_acordo(self, payload: ConcludeAcordoInput) -> Acordo:
        """Mark a dacao or compensacao agreement fulfilled without payments."""

        try:
            acordo = self._acordo_repository.get_for_update(payload.acordo_id)
            if acordo is None:
                raise _acordo_not_found(payload.acordo_id)
            _ensure_acordo_ativo(
                acordo, action="Somente acordos ativos podem ser concluídos."
            )

            processo = self._processo_repository.get_for_update(acordo.processo_id)
            if processo is None:
                raise _processo_not_found(acordo.processo_id)
            if processo.tipo not in DIRECTLY_CONCLUDABLE_TYPES:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause=(
                            f"Processos do tipo {processo.tipo.value} não admitem "
                            "conclusão direta do acordo."
                        ),
                        action="Conclua o acordo pela quitação das parcelas.",
                    ),
                    details={"processo_tipo": processo.tipo.value},
                )

            before = acordo_snapshot(acordo)
            acordo.status = AcordoStatus.CUMPRIDO
            descricao = f"Acordo {acordo.numero_termo} concluído."
            if payload.observacoes:
                descricao = f"{descricao} {payload.observacoes.strip()}"
            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo="Acordo Concluído",
                descricao=descricao,
                tipo=TipoHistorico.ACORDO_CONCLUIDO,
            )
            if payload.atualizar_processo:
                processo.status = ProcessoStatus.CONCLUIDO
                self._audit_repository.add_historico(
                    processo_id=processo.id,
                    usuario_id=payload.usuario_id,
                    titulo="Processo Concluído",
                    descricao=(
                        f"Processo {processo.numero} concluído após o cumprimento "
                        f"do acordo {acordo.numero_termo}."
                    ),
                    tipo=TipoHistorico.PROCESSO_CONCLUIDO,
                )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="ACORDO_CONCLUIDO",
                entidade="Acordo",
                entidade_id=str(acordo.id),
                dados_anteriores=before,
                dados_novos={
                    **acordo_snapshot(acordo),
                    "processo_status": processo.status.value,
                },
            )

            self._session.commit()
            self._session.refresh(acordo)
            logger.info(
                "acordo_concluido",
                extra={
                    "acordo_id": str(acordo.id),
                    "processo_id": str(processo.id),
                    "atualizar_processo": payload.atualizar_processo,
                },
            )
            return acordo
        except Exception:
            self._session.rollback()
            raise

    def update_detalhe(self, payload: UpdateDetalheInput) -> DetalheResult:
        """Change a component status, completing the agreement when all execute."""

        try:
            acordo = self._acordo_repository.get_for_update(payload.acordo_id)
            if acordo is None:
                raise _acordo_not_found(payload.acordo_id)
            detalhe = self._acordo_repository.get_detalhe(payload.detalhe_id)
            if detalhe is None or detalhe.acordo_id != acordo.id:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Item do acordo não encontrado.",
                        action="Confira o detalheId informado para este acordo.",
                    ),
                    details={"detalhe_id": str(payload.detalhe_id)},
                )
            _ensure_acordo_ativo(
                acordo, action="Atualize itens apenas de acordos ativos."
            )

            before = {
                "status": detalhe.status.value,
                "observacoes": detalhe.observacoes,
            }
            if (
                payload.status == DetalheStatus.EXECUTADO
                and detalhe.status != DetalheStatus.EXECUTADO
            ):
                detalhe.data_execucao = now_local()
                for inscricao in self._acordo_repository.list_inscricoes_for_detalhe(
                    detalhe.id
                ):
                    inscricao.situacao = SituacaoInscricao.QUITADO
            detalhe.status = payload.status
            if payload.observacoes is not None:
                detalhe.observacoes = payload.observacoes

            detalhes = self._acordo_repository.list_detalhes(acordo.id)
            acordo_cumprido = bool(detalhes) and all(
                item.status == DetalheStatus.EXECUTADO for item in detalhes
            )
            if acordo_cumprido:
                self._completion.mark_fulfilled(
                    acordo=acordo,
                    trigger=FulfillmentTrigger.EXECUCAO_DETALHES,
                    usuario_id=payload.usuario_id,
                    titulo="Acordo Cumprido",
                    descricao=(
                        f"Todos os itens do acordo {acordo.numero_termo} "
                        "foram executados."
                    ),
                )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="UPDATE",
                entidade="AcordoDetalhe",
                entidade_id=str(detalhe.id),
                dados_anteriores=before,
                dados_novos={
                    "status": detalhe.status.value,
                    "observacoes": detalhe.observacoes,
                    "acordo_cumprido": acordo_cumprido,
                },
            )

            self._session.commit()
            self._session.refresh(detalhe)
            logger.info(
                "detalhe_acordo_atualizado",
                extra={
                    "acordo_id": str(acordo.id),
                    "detalhe_id": str(detalhe.id),
                    "status": detalhe.status.value,
                    "acordo_cumprido": acordo_cumprido,
                },
            )
            return DetalheResult(
                detalhe=detalhe,
                acordo=acordo,
                acordo_cumprido=acordo_cumprido,
            )
        except Exception:
            self._session.rollback()
            raise

    def update_custas(self, payload: UpdateCustasInput) -> CustasResult:
        """Record legal cost dates, completing the agreement when all is paid."""

        try:
            acordo = self._acordo_repository.get_for_update(payload.acordo_id)
            if acordo is None:
                raise _acordo_not_found(payload.acordo_id)
            transacao = self._acordo_repository.get_transacao(acordo.id)
            if (
                transacao is None
                or transacao.custas_advocaticias is None
                or transacao.custas_advocaticias <= ZERO
            ):
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause="Este acordo não possui custas advocatícias.",
                        action="Atualize custas apenas em transações com custas.",
                    )
                )
            _ensure_acordo_ativo(
                acordo, action="Atualize custas apenas de acordos ativos."
            )

            before = {
                "custas_data_vencimento": _iso(transacao.custas_data_vencimento),
                "custas_data_pagamento": _iso(transacao.custas_data_pagamento),
            }
            if payload.custas_data_vencimento is not None:
                transacao.custas_data_vencimento = payload.custas_data_vencimento
            transacao.custas_data_pagamento = payload.custas_data_pagamento

            acordo_cumprido = self._completion.complete_if_fulfilled(
                acordo=acordo,
                trigger=FulfillmentTrigger.QUITACAO_CUSTAS,
                usuario_id=payload.usuario_id,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="UPDATE",
                entidade="AcordoTransacao",
                entidade_id=str(transacao.id),
                dados_anteriores=before,
                dados_novos={
                    "custas_data_vencimento": _iso(transacao.custas_data_vencimento),
                    "custas_data_pagamento": _iso(transacao.custas_data_pagamento),
                    "acordo_cumprido": acordo_cumprido,
                },
            )

            self._session.commit()
            self._session.refresh(transacao)
            logger.info(
                "custas_atualizadas",
                extra={
                    "acordo_id": str(acordo.id),
                    "custas_pagas": transacao.custas_data_pagamento is not None,
                    "acordo_cumprido": acordo_cumprido,
                },
            )
            return CustasResult(
                transacao=transacao,
                acordo=acordo,
                acordo_cumprido=acordo_cumprido,
            )
        except Exception:
            self._session.rollback()
            raise

    def update_honorarios(self, payload: UpdateHonorariosInput) -> AcordoHonorarios:
        """Record attorney fee dates of a compensacao or dacao agreement.

        Fees never gate fulfillment, so the agreement status is untouched.
        """

        try:
            acordo = self._acordo_repository.get_for_update(payload.acordo_id)
            if acordo is None:
                raise _acordo_not_found(payload.acordo_id)
            processo = self._processo_repository.get(acordo.processo_id)
            if processo is None:
                raise _processo_not_found(acordo.processo_id)
            if processo.tipo not in DIRECTLY_CONCLUDABLE_TYPES:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause=(
                            "Apenas acordos de compensação e dação têm controle "
                            "de honorários."
                        ),
                        action="Use a rota de custas para transações excepcionais.",
                    ),
                    details={"processo_tipo": processo.tipo.value},
                )
            honorarios = self._acordo_repository.get_honorarios(acordo.id)
            if (
                honorarios is None
                or honorarios.honorarios_valor is None
                or honorarios.honorarios_valor <= ZERO
            ):
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause="Este acordo não possui honorários.",
                        action="Informe honorários na criação do acordo.",
                    )
                )
            _ensure_acordo_ativo(
                acordo, action="Atualize honorários apenas de acordos ativos."
            )

            before = {
                "honorarios_data_vencimento": _iso(
                    honorarios.honorarios_data_vencimento
                ),
                "honorarios_data_pagamento": _iso(honorarios.honorarios_data_pagamento),
            }
            honorarios.honorarios_data_vencimento = payload.honorarios_data_vencimento
            honorarios.honorarios_data_pagamento = payload.honorarios_data_pagamento
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="UPDATE",
                entidade="AcordoHonorarios",
                entidade_id=str(honorarios.id),
                dados_anteriores=before,
                dados_novos={
                    "honorarios_data_vencimento": _iso(
                        honorarios.honorarios_data_vencimento
                    ),
                    "honorarios_data_pagamento": _iso(
                        honorarios.honorarios_data_pagamento
                    ),
                    "processo": processo.numero,
                },
            )

            self._session.commit()
            self._session.refresh(honorarios)
            logger.info(
                "honorarios_atualizados",
                extra={
                    "acordo_id": str(acordo.id),
                    "honorarios_pagos": (
                        honorarios.honorarios_data_pagamento is not None
                    ),
                },
            )
            return honorarios
        except Exception:
            self._session.rollback()
            raise

    def cancel_acordo(self, payload: CancelAcordoInput) -> Acordo:
        """Cancel an agreement and its open installments, reopening the case."""

        try:
            acordo = self._acordo_repository.get_for_update(payload.acordo_id)
            if acordo is None:
                raise _acordo_not_found(payload.acordo_id)
            if acordo.status not in CANCELLABLE_STATUSES:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause=f"O acordo está com status {acordo.status.value}.",
                        action="Somente acordos ativos ou vencidos são cancelados.",
                    ),
                    details={"acordo_status": acordo.status.value},
                )

            before = acordo_snapshot(acordo)
            parcelas_canceladas = 0
            for parcela in self._parcela_repository.list_for_acordo(acordo.id):
                if parcela.status in OPEN_PARCELA_STATUSES:
                    parcela.status = ParcelaStatus.CANCELADO
                    parcelas_canceladas += 1
            acordo.status = AcordoStatus.CANCELADO

            processo = self._processo_repository.get_for_update(acordo.processo_id)
            if processo is None:
                raise _processo_not_found(acordo.processo_id)
            if processo.status != ProcessoStatus.JULGADO:
                ensure_transition_allowed(processo.status, ProcessoStatus.JULGADO)
                processo.status = ProcessoStatus.JULGADO

            descricao = f"Acordo {acordo.numero_termo} cancelado."
            if payload.motivo:
                descricao = f"{descricao} Motivo: {payload.motivo.strip()}"
            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo="Acordo Cancelado",
                descricao=descricao,
                tipo=TipoHistorico.ACORDO,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="ACORDO_CANCELADO",
                entidade="Acordo",
                entidade_id=str(acordo.id),
                dados_anteriores=before,
                dados_novos={
                    **acordo_snapshot(acordo),
                    "parcelas_canceladas": parcelas_canceladas,
                    "motivo": payload.motivo,
                },
            )

            self._session.commit()
            self._session.refresh(acordo)
            logger.info(
                "acordo_cancelado",
                extra={
                    "acordo_id": str(acordo.id),
                    "parcelas_canceladas": parcelas_canceladas,
                },
            )
            return acordo
        except Exception:
            self._session.rollback()
            raise

    def _ensure_settleable(self, processo: Processo) -> None:
        if processo.status != ProcessoStatus.JULGADO:
            raise InvalidStateError(
                message=compose_error_message(
                    cause=f"O processo está com status {processo.status.value}.",
                    action="Acordos só podem ser firmados em processos julgados.",
                ),
                details={"processo_status": processo.status.value},
            )

        decisao = self._processo_repository.get_latest_decisao(processo.id)
        if decisao is None or decisao.tipo_decisao not in SETTLEABLE_DECISIONS:
            raise InvalidStateError(
                message=compose_error_message(
                    cause="A decisão do processo não foi deferida.",
                    action="Acordos exigem decisão DEFERIDO ou PARCIAL.",
                ),
                details={
                    "tipo_decisao": (
                        decisao.tipo_decisao.value
                        if decisao and decisao.tipo_decisao
                        else None
                    )
                },
            )

        if self._acordo_repository.get_active_for_processo(processo.id) is not None:
            raise InvalidStateError(
                message=compose_error_message(
                    cause="O processo já possui um acordo ativo.",
                    action="Conclua ou cancele o acordo vigente antes de criar outro.",
                ),
                details={"processo_id": str(processo.id)},
            )

    @staticmethod
    def _validate_values(payload: CreateAcordoInput, processo: Processo) -> None:
        errors: list[str] = []
        if payload.valor_total <= ZERO:
            errors.append("valorTotal deve ser maior que zero.")
        if payload.valor_desconto < ZERO or payload.valor_desconto > payload.valor_total:
            errors.append("valorDesconto deve estar entre zero e valorTotal.")
        if payload.valor_final <= ZERO:
            errors.append("valorFinal deve ser maior que zero.")
        if payload.valor_entrada < ZERO or payload.valor_entrada >= payload.valor_final:
            errors.append("valorEntrada deve ser não negativo e menor que valorFinal.")
        if payload.numero_parcelas < 1:
            errors.append("numeroParcelas deve ser pelo menos 1.")
        if payload.data_vencimento < payload.data_assinatura:
            errors.append("dataVencimento não pode ser anterior à dataAssinatura.")
        if payload.detalhes and processo.tipo not in DIRECTLY_CONCLUDABLE_TYPES:
            errors.append("Detalhes só se aplicam a dação em pagamento ou compensação.")
        if payload.custas_advocaticias is not None and payload.custas_advocaticias < ZERO:
            errors.append("custasAdvocaticias não pode ser negativo.")
        if payload.honorarios_valor is not None and payload.honorarios_valor < ZERO:
            errors.append("honorariosValor não pode ser negativo.")
        if (
            payload.honorarios_data_vencimento is not None
            and processo.tipo not in DIRECTLY_CONCLUDABLE_TYPES
        ):
            errors.append(
                "honorariosDataVencimento só se aplica a dação em pagamento "
                "ou compensação."
            )

        if errors:
            raise InvalidRequestError(
                message=compose_error_message(
                    cause=" ".join(errors),
                    action="Corrija os valores do acordo e tente novamente.",
                ),
                details={"errors": errors},
            )


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None
