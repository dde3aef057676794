"""Docket, judgment session and decision use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from conciliacao_fiscal.db.models.decisao import (
    Decisao,
    PosicaoVoto,
    TipoDecisao,
    TipoResultado,
    TipoVoto,
    Voto,
)
from conciliacao_fiscal.db.models.historico import TipoHistorico
from conciliacao_fiscal.db.models.pauta import (
    Pauta,
    PautaStatus,
    ProcessoPauta,
    SessaoJulgamento,
)
from conciliacao_fiscal.db.models.processo import ProcessoStatus
from conciliacao_fiscal.domain.dates import now_local
from conciliacao_fiscal.domain.errors import (
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
    compose_error_message,
)
from conciliacao_fiscal.domain.services.processo_lifecycle import (
    DOCKETABLE_STATUSES,
    ensure_transition_allowed,
)
from conciliacao_fiscal.services.ports import (
    AuditRepositoryProtocol,
    PautaRepositoryProtocol,
    ProcessoRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CreatePautaInput:
    """Input model for docket creation."""

    numero: str
    data_pauta: date
    usuario_id: str
    descricao: str | None = None


@dataclass(slots=True, frozen=True)
class IncluirProcessoInput:
    """Input model for placing a case on a docket."""

    pauta_id: UUID
    processo_id: UUID
    usuario_id: str
    relator: str | None = None
    revisores: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class AbrirSessaoInput:
    """Input model for opening a judgment session."""

    pauta_id: UUID
    usuario_id: str
    data_inicio: datetime | None = None
    presidente: str | None = None


@dataclass(slots=True, frozen=True)
class VotoInput:
    """One vote cast on a decision."""

    tipo_voto: TipoVoto
    nome_votante: str
    posicao_voto: PosicaoVoto | None = None
    texto_voto: str | None = None
    ordem_apresentacao: int | None = None
    is_presidente: bool = False


@dataclass(slots=True, frozen=True)
class RegistrarDecisaoInput:
    """Input model for recording a case decision in a session."""

    sessao_id: UUID
    processo_id: UUID
    tipo_resultado: TipoResultado
    usuario_id: str
    tipo_decisao: TipoDecisao | None = None
    observacoes: str | None = None
    conselheiro_pedido_vista: str | None = None
    prazo_vista: date | None = None
    especificacao_diligencia: str | None = None
    prazo_diligencia: date | None = None
    votos: tuple[VotoInput, ...] = ()


@dataclass(slots=True, frozen=True)
class FinalizarSessaoInput:
    """Input model for closing a judgment session."""

    sessao_id: UUID
    usuario_id: str


_RESULTADO_TO_STATUS: dict[TipoResultado, ProcessoStatus] = {
    TipoResultado.SUSPENSO: ProcessoStatus.SUSPENSO,
    TipoResultado.PEDIDO_VISTA: ProcessoStatus.PEDIDO_VISTA,
    TipoResultado.PEDIDO_DILIGENCIA: ProcessoStatus.PEDIDO_DILIGENCIA,
    TipoResultado.JULGADO: ProcessoStatus.JULGADO,
}


def _normalize_name(value: str) -> str:
    return " ".join(value.split()).casefold()


class JulgamentoService:
    """Coordinates docket composition and panel decisions."""

    def __init__(
        self,
        *,
        pauta_repository: PautaRepositoryProtocol,
        processo_repository: ProcessoRepositoryProtocol,
        audit_repository: AuditRepositoryProtocol,
        session: SessionProtocol,
    ) -> None:
        self._pauta_repository = pauta_repository
        self._processo_repository = processo_repository
        self._audit_repository = audit_repository
        self._session = session

    def create_pauta(self, payload: CreatePautaInput) -> Pauta:
        try:
            numero = payload.numero.strip()
            if self._pauta_repository.get_pauta_by_numero(numero) is not None:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause=f"Já existe uma pauta com o número {numero}.",
                        action="Informe um número de pauta inédito.",
                    )
                )
            pauta = Pauta(
                numero=numero,
                data_pauta=payload.data_pauta,
                descricao=payload.descricao,
                status=PautaStatus.ABERTA,
            )
            self._pauta_repository.add(pauta)
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="Pauta",
                entidade_id=str(pauta.id),
                dados_novos={
                    "numero": pauta.numero,
                    "data_pauta": pauta.data_pauta.isoformat(),
                },
            )
            self._session.commit()
            self._session.refresh(pauta)
            logger.info("pauta_criada", extra={"pauta_id": str(pauta.id)})
            return pauta
        except Exception:
            self._session.rollback()
            raise

    def incluir_processo(self, payload: IncluirProcessoInput) -> ProcessoPauta:
        """Append a case to an open docket in the next order slot."""

        try:
            pauta = self._pauta_repository.get_pauta_for_update(payload.pauta_id)
            if pauta is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Pauta não encontrada.",
                        action="Confira o identificador da pauta.",
                    ),
                    details={"pauta_id": str(payload.pauta_id)},
                )
            if pauta.status != PautaStatus.ABERTA:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="A pauta está fechada.",
                        action="Inclua processos apenas em pautas abertas.",
                    ),
                    details={"pauta_status": pauta.status.value},
                )

            processo = self._processo_repository.get_for_update(payload.processo_id)
            if processo is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Processo não encontrado.",
                        action="Confira o identificador do processo.",
                    ),
                    details={"processo_id": str(payload.processo_id)},
                )
            if processo.status not in DOCKETABLE_STATUSES:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause=(
                            f"Processos com status {processo.status.value} não podem "
                            "ser incluídos em pauta."
                        ),
                        action="Inclua processos em análise, suspensos ou em vista.",
                    ),
                    details={"processo_status": processo.status.value},
                )
            if self._pauta_repository.get_entry(pauta.id, processo.id) is not None:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="O processo já está nesta pauta.",
                        action="Escolha outro processo ou outra pauta.",
                    )
                )

            revisores = [nome.strip() for nome in payload.revisores if nome.strip()]
            entry = ProcessoPauta(
                pauta_id=pauta.id,
                processo_id=processo.id,
                ordem=self._pauta_repository.get_max_ordem(pauta.id) + 1,
                relator=payload.relator.strip() if payload.relator else None,
                revisores=revisores,
            )
            self._pauta_repository.add(entry)

            ensure_transition_allowed(processo.status, ProcessoStatus.EM_PAUTA)
            processo.status = ProcessoStatus.EM_PAUTA
            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo="Incluído em Pauta",
                descricao=(
                    f"Processo incluído na pauta {pauta.numero} "
                    f"de {pauta.data_pauta.isoformat()} na posição {entry.ordem}."
                ),
                tipo=TipoHistorico.PAUTA,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="ProcessoPauta",
                entidade_id=str(entry.id),
                dados_novos={
                    "pauta_id": str(pauta.id),
                    "processo_id": str(processo.id),
                    "ordem": entry.ordem,
                    "relator": entry.relator,
                    "revisores": revisores,
                },
            )
            self._session.commit()
            self._session.refresh(entry)
            logger.info(
                "processo_incluido_em_pauta",
                extra={
                    "pauta_id": str(pauta.id),
                    "processo_id": str(processo.id),
                    "ordem": entry.ordem,
                },
            )
            return entry
        except Exception:
            self._session.rollback()
            raise

    def abrir_sessao(self, payload: AbrirSessaoInput) -> SessaoJulgamento:
        try:
            pauta = self._pauta_repository.get_pauta_for_update(payload.pauta_id)
            if pauta is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Pauta não encontrada.",
                        action="Confira o identificador da pauta.",
                    ),
                    details={"pauta_id": str(payload.pauta_id)},
                )
            if pauta.status != PautaStatus.ABERTA:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="A pauta já foi encerrada.",
                        action="Abra sessões apenas para pautas abertas.",
                    )
                )
            if self._pauta_repository.get_sessao_for_pauta(pauta.id) is not None:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="Já existe uma sessão para esta pauta.",
                        action="Registre decisões na sessão existente.",
                    )
                )

            sessao = SessaoJulgamento(
                pauta_id=pauta.id,
                data_inicio=payload.data_inicio or now_local(),
                presidente=payload.presidente,
            )
            self._pauta_repository.add(sessao)
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="SessaoJulgamento",
                entidade_id=str(sessao.id),
                dados_novos={"pauta_id": str(pauta.id)},
            )
            self._session.commit()
            self._session.refresh(sessao)
            logger.info(
                "sessao_aberta",
                extra={"sessao_id": str(sessao.id), "pauta_id": str(pauta.id)},
            )
            return sessao
        except Exception:
            self._session.rollback()
            raise

    def registrar_decisao(self, payload: RegistrarDecisaoInput) -> Decisao:
        """Record a decision with votes and move the case to the outcome status."""

        try:
            sessao = self._pauta_repository.get_sessao_for_update(payload.sessao_id)
            if sessao is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Sessão de julgamento não encontrada.",
                        action="Confira o identificador da sessão.",
                    ),
                    details={"sessao_id": str(payload.sessao_id)},
                )
            if sessao.data_fim is not None:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="A sessão de julgamento já foi finalizada.",
                        action="Registre decisões apenas em sessões em andamento.",
                    )
                )

            entry = self._pauta_repository.get_entry(
                sessao.pauta_id, payload.processo_id
            )
            if entry is None:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="O processo não consta na pauta desta sessão.",
                        action="Inclua o processo na pauta antes de decidir.",
                    )
                )
            if self._pauta_repository.has_decisao(sessao.id, payload.processo_id):
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="Já existe decisão para este processo nesta sessão.",
                        action="Cada processo recebe uma decisão por sessão.",
                    )
                )
            self._validate_decisao(payload, entry)

            processo = self._processo_repository.get_for_update(payload.processo_id)
            if processo is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Processo não encontrado.",
                        action="Confira o identificador do processo.",
                    ),
                    details={"processo_id": str(payload.processo_id)},
                )
            target_status = _RESULTADO_TO_STATUS[payload.tipo_resultado]
            ensure_transition_allowed(processo.status, target_status)

            decisao = Decisao(
                sessao_id=sessao.id,
                processo_id=processo.id,
                tipo_resultado=payload.tipo_resultado,
                tipo_decisao=(
                    payload.tipo_decisao
                    if payload.tipo_resultado == TipoResultado.JULGADO
                    else None
                ),
                observacoes=payload.observacoes,
                conselheiro_pedido_vista=payload.conselheiro_pedido_vista,
                prazo_vista=payload.prazo_vista,
                especificacao_diligencia=payload.especificacao_diligencia,
                prazo_diligencia=payload.prazo_diligencia,
                votos=[
                    Voto(
                        tipo_voto=voto.tipo_voto,
                        nome_votante=voto.nome_votante.strip(),
                        posicao_voto=voto.posicao_voto,
                        texto_voto=voto.texto_voto,
                        ordem_apresentacao=voto.ordem_apresentacao,
                        is_presidente=voto.is_presidente,
                    )
                    for voto in payload.votos
                ],
            )
            self._pauta_repository.add(decisao)

            revisores = list(entry.revisores or [])
            known = {_normalize_name(nome) for nome in revisores}
            new_names = [
                voto.nome_votante.strip()
                for voto in payload.votos
                if voto.tipo_voto == TipoVoto.REVISOR
            ]
            if (
                payload.tipo_resultado == TipoResultado.PEDIDO_VISTA
                and payload.conselheiro_pedido_vista
            ):
                new_names.append(payload.conselheiro_pedido_vista.strip())
            for nome in new_names:
                if _normalize_name(nome) not in known:
                    revisores.append(nome)
                    known.add(_normalize_name(nome))
            entry.revisores = revisores
            entry.status_sessao = payload.tipo_resultado.value

            processo.status = target_status
            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo=f"Decisão: {payload.tipo_resultado.value}",
                descricao=self._describe_decisao(payload),
                tipo=TipoHistorico.DECISAO,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="Decisao",
                entidade_id=str(decisao.id),
                dados_novos={
                    "sessao_id": str(sessao.id),
                    "processo_id": str(processo.id),
                    "tipo_resultado": payload.tipo_resultado.value,
                    "tipo_decisao": (
                        decisao.tipo_decisao.value if decisao.tipo_decisao else None
                    ),
                    "votos": len(payload.votos),
                },
            )
            self._session.commit()
            self._session.refresh(decisao)
            logger.info(
                "decisao_registrada",
                extra={
                    "decisao_id": str(decisao.id),
                    "processo_id": str(processo.id),
                    "tipo_resultado": payload.tipo_resultado.value,
                },
            )
            return decisao
        except Exception:
            self._session.rollback()
            raise

    def finalizar_sessao(self, payload: FinalizarSessaoInput) -> SessaoJulgamento:
        try:
            sessao = self._pauta_repository.get_sessao_for_update(payload.sessao_id)
            if sessao is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Sessão de julgamento não encontrada.",
                        action="Confira o identificador da sessão.",
                    ),
                    details={"sessao_id": str(payload.sessao_id)},
                )
            if sessao.data_fim is not None:
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="A sessão de julgamento já foi finalizada.",
                        action="Nenhuma ação adicional é necessária.",
                    )
                )

            sessao.data_fim = now_local()
            pauta = self._pauta_repository.get_pauta_for_update(sessao.pauta_id)
            if pauta is not None:
                pauta.status = PautaStatus.FECHADA
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="UPDATE",
                entidade="SessaoJulgamento",
                entidade_id=str(sessao.id),
                dados_novos={"data_fim": sessao.data_fim.isoformat()},
            )
            self._session.commit()
            self._session.refresh(sessao)
            logger.info("sessao_finalizada", extra={"sessao_id": str(sessao.id)})
            return sessao
        except Exception:
            self._session.rollback()
            raise

    @staticmethod
    def _validate_decisao(
        payload: RegistrarDecisaoInput,
        entry: ProcessoPauta,
    ) -> None:
        if payload.tipo_resultado == TipoResultado.JULGADO and not payload.tipo_decisao:
            raise InvalidRequestError(
                message=compose_error_message(
                    cause="Resultado JULGADO exige o tipo de decisão.",
                    action="Informe tipoDecisao DEFERIDO, INDEFERIDO ou PARCIAL.",
                )
            )
        if payload.tipo_resultado == TipoResultado.PEDIDO_VISTA:
            conselheiro = (payload.conselheiro_pedido_vista or "").strip()
            if not conselheiro:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause="Pedido de vista exige o conselheiro solicitante.",
                        action="Informe conselheiroPedidoVista.",
                    )
                )
            blocked = {_normalize_name(nome) for nome in entry.revisores or []}
            if entry.relator:
                blocked.add(_normalize_name(entry.relator))
            if _normalize_name(conselheiro) in blocked:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause=(
                            "O relator ou revisores do processo não podem "
                            "pedir vista."
                        ),
                        action="Indique outro conselheiro para o pedido de vista.",
                    )
                )
        if payload.tipo_resultado == TipoResultado.PEDIDO_DILIGENCIA and not (
            payload.especificacao_diligencia or ""
        ).strip():
            raise InvalidRequestError(
                message=compose_error_message(
                    cause="Pedido de diligência exige a especificação.",
                    action="Informe especificacaoDiligencia.",
                )
            )

    @staticmethod
    def _describe_decisao(payload: RegistrarDecisaoInput) -> str:
        if payload.tipo_resultado == TipoResultado.JULGADO and payload.tipo_decisao:
            descricao = f"Processo julgado: {payload.tipo_decisao.value}."
        elif payload.tipo_resultado == TipoResultado.PEDIDO_VISTA:
            descricao = f"Pedido de vista por {payload.conselheiro_pedido_vista}."
        elif payload.tipo_resultado == TipoResultado.PEDIDO_DILIGENCIA:
            descricao = f"Diligência solicitada: {payload.especificacao_diligencia}."
        else:
            descricao = "Julgamento suspenso."
        if payload.observacoes:
            descricao = f"{descricao} {payload.observacoes.strip()}"
        return descricao
