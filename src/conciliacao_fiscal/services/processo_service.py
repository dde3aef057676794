"""Case registry use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.historico import HistoricoProcesso, TipoHistorico
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus, TipoProcesso
from conciliacao_fiscal.domain.errors import (
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
    compose_error_message,
)
from conciliacao_fiscal.domain.money import ZERO, format_money, quantize_money
from conciliacao_fiscal.domain.services.processo_lifecycle import (
    ensure_transition_allowed,
)
from conciliacao_fiscal.services.ports import (
    AuditRepositoryProtocol,
    ProcessoRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ContribuinteInput:
    """Taxpayer data supplied with a new case."""

    nome: str
    documento: str
    email: str | None = None
    telefone: str | None = None


@dataclass(slots=True, frozen=True)
class CreateProcessoInput:
    """Input model for case registration."""

    numero: str
    tipo: TipoProcesso
    valor_original: Decimal
    contribuinte: ContribuinteInput
    usuario_id: str
    observacoes: str | None = None


@dataclass(slots=True, frozen=True)
class ChangeStatusInput:
    """Input model for a manual case status change."""

    processo_id: UUID
    status: ProcessoStatus
    usuario_id: str
    observacoes: str | None = None


def _normalize_documento(value: str) -> str:
    return "".join(char for char in value if char.isalnum())


class ProcessoService:
    """Registers cases and applies manual lifecycle transitions."""

    def __init__(
        self,
        *,
        processo_repository: ProcessoRepositoryProtocol,
        audit_repository: AuditRepositoryProtocol,
        session: SessionProtocol,
    ) -> None:
        self._processo_repository = processo_repository
        self._audit_repository = audit_repository
        self._session = session

    def create_processo(self, payload: CreateProcessoInput) -> Processo:
        """Create a case, reusing the taxpayer when the document is known."""

        try:
            numero = payload.numero.strip()
            if self._processo_repository.get_by_numero(numero) is not None:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause=f"Já existe um processo com o número {numero}.",
                        action="Informe um número de processo inédito.",
                    )
                )
            valor_original = quantize_money(payload.valor_original)
            if valor_original < ZERO:
                raise InvalidRequestError(
                    message=compose_error_message(
                        cause="O valor original não pode ser negativo.",
                        action="Informe o valor do débito em discussão.",
                    )
                )

            documento = _normalize_documento(payload.contribuinte.documento)
            contribuinte = self._processo_repository.get_contribuinte_by_documento(
                documento
            )
            if contribuinte is None:
                contribuinte = self._processo_repository.add_contribuinte(
                    Contribuinte(
                        nome=payload.contribuinte.nome.strip(),
                        documento=documento,
                        email=payload.contribuinte.email,
                        telefone=payload.contribuinte.telefone,
                    )
                )

            processo = self._processo_repository.add(
                Processo(
                    numero=numero,
                    tipo=payload.tipo,
                    status=ProcessoStatus.RECEPCIONADO,
                    valor_original=valor_original,
                    observacoes=payload.observacoes,
                    contribuinte_id=contribuinte.id,
                )
            )
            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo="Processo Recepcionado",
                descricao=(
                    f"Processo {numero} recepcionado no valor de "
                    f"R$ {format_money(valor_original)}."
                ),
                tipo=TipoHistorico.ALTERACAO,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="CREATE",
                entidade="Processo",
                entidade_id=str(processo.id),
                dados_novos={
                    "numero": numero,
                    "tipo": payload.tipo.value,
                    "valor_original": format_money(valor_original),
                    "contribuinte_id": str(contribuinte.id),
                },
            )
            self._session.commit()
            self._session.refresh(processo)
            logger.info(
                "processo_criado",
                extra={"processo_id": str(processo.id), "numero": numero},
            )
            return processo
        except Exception:
            self._session.rollback()
            raise

    def get_processo(self, processo_id: UUID) -> Processo:
        processo = self._processo_repository.get(processo_id)
        if processo is None:
            raise NotFoundError(
                message=compose_error_message(
                    cause="Processo não encontrado.",
                    action="Confira o identificador do processo.",
                ),
                details={"processo_id": str(processo_id)},
            )
        return processo

    def change_status(self, payload: ChangeStatusInput) -> Processo:
        """Apply a manual status change allowed by the lifecycle table.

        Setting the current status again is a no-op without history.
        """

        try:
            processo = self._processo_repository.get_for_update(payload.processo_id)
            if processo is None:
                raise NotFoundError(
                    message=compose_error_message(
                        cause="Processo não encontrado.",
                        action="Confira o identificador do processo.",
                    ),
                    details={"processo_id": str(payload.processo_id)},
                )
            if processo.status == payload.status:
                self._session.commit()
                return processo

            previous = processo.status
            ensure_transition_allowed(previous, payload.status)
            if (
                previous == ProcessoStatus.EM_CUMPRIMENTO
                and self._processo_repository.has_open_acordo(processo.id)
            ):
                raise InvalidStateError(
                    message=compose_error_message(
                        cause="O processo possui um acordo em vigor.",
                        action="Conclua ou cancele o acordo antes de alterar o status.",
                    ),
                    details={
                        "status_atual": previous.value,
                        "status_destino": payload.status.value,
                    },
                )
            processo.status = payload.status

            descricao = f"Status alterado de {previous.value} para {payload.status.value}."
            if payload.observacoes:
                descricao = f"{descricao} {payload.observacoes.strip()}"
            self._audit_repository.add_historico(
                processo_id=processo.id,
                usuario_id=payload.usuario_id,
                titulo="Status Alterado",
                descricao=descricao,
                tipo=TipoHistorico.ALTERACAO,
            )
            self._audit_repository.add_log(
                usuario_id=payload.usuario_id,
                acao="UPDATE",
                entidade="Processo",
                entidade_id=str(processo.id),
                dados_anteriores={"status": previous.value},
                dados_novos={"status": processo.status.value},
            )
            self._session.commit()
            self._session.refresh(processo)
            logger.info(
                "processo_status_alterado",
                extra={
                    "processo_id": str(processo.id),
                    "de": previous.value,
                    "para": processo.status.value,
                },
            )
            return processo
        except Exception:
            self._session.rollback()
            raise

    def list_historico(self, processo_id: UUID) -> list[HistoricoProcesso]:
        self.get_processo(processo_id)
        return self._audit_repository.list_historico(processo_id)
