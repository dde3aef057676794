"""Case lifecycle state machine."""

from __future__ import annotations

from conciliacao_fiscal.db.models.processo import ProcessoStatus
from conciliacao_fiscal.domain.errors import InvalidStateError, compose_error_message

_S = ProcessoStatus

ALLOWED_TRANSITIONS: dict[ProcessoStatus, frozenset[ProcessoStatus]] = {
    _S.RECEPCIONADO: frozenset({_S.EM_ANALISE}),
    _S.EM_ANALISE: frozenset({_S.EM_PAUTA, _S.RECEPCIONADO}),
    _S.EM_PAUTA: frozenset(
        {
            _S.EM_ANALISE,
            _S.SUSPENSO,
            _S.PEDIDO_VISTA,
            _S.PEDIDO_DILIGENCIA,
            _S.JULGADO,
        }
    ),
    _S.SUSPENSO: frozenset({_S.EM_ANALISE, _S.EM_PAUTA}),
    _S.PEDIDO_VISTA: frozenset({_S.EM_ANALISE, _S.EM_PAUTA}),
    _S.PEDIDO_DILIGENCIA: frozenset({_S.EM_ANALISE, _S.EM_PAUTA}),
    _S.JULGADO: frozenset({_S.ACORDO_FIRMADO, _S.EM_CUMPRIMENTO, _S.CONCLUIDO}),
    _S.ACORDO_FIRMADO: frozenset({_S.EM_CUMPRIMENTO, _S.CONCLUIDO, _S.JULGADO}),
    _S.EM_CUMPRIMENTO: frozenset({_S.ACORDO_FIRMADO, _S.CONCLUIDO, _S.JULGADO}),
    _S.CONCLUIDO: frozenset(),
}

# Statuses from which a case may be placed on a docket.
DOCKETABLE_STATUSES: frozenset[ProcessoStatus] = frozenset(
    {_S.EM_ANALISE, _S.SUSPENSO, _S.PEDIDO_VISTA, _S.PEDIDO_DILIGENCIA}
)


def can_transition(current: ProcessoStatus, target: ProcessoStatus) -> bool:
    """Return whether a manual move from current to target is allowed."""

    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition_allowed(current: ProcessoStatus, target: ProcessoStatus) -> None:
    """Raise InvalidStateError when the transition is not in the table."""

    if can_transition(current, target):
        return
    raise InvalidStateError(
        message=compose_error_message(
            cause=f"Transição de {current.value} para {target.value} não permitida.",
            action="Escolha um status compatível com a fase atual do processo.",
        ),
        details={"status_atual": current.value, "status_destino": target.value},
    )
