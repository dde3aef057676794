import pytest

from conciliacao_fiscal.db.models.processo import ProcessoStatus
from conciliacao_fiscal.domain.errors import InvalidStateError
from conciliacao_fiscal.domain.services.processo_lifecycle import (
    can_transition,
    ensure_transition_allowed,
)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (ProcessoStatus.RECEPCIONADO, ProcessoStatus.EM_ANALISE),
        (ProcessoStatus.EM_PAUTA, ProcessoStatus.JULGADO),
        (ProcessoStatus.PEDIDO_VISTA, ProcessoStatus.EM_PAUTA),
        (ProcessoStatus.JULGADO, ProcessoStatus.EM_CUMPRIMENTO),
        (ProcessoStatus.EM_CUMPRIMENTO, ProcessoStatus.JULGADO),
    ],
)
def test_allowed_transitions(current: ProcessoStatus, target: ProcessoStatus) -> None:
    assert can_transition(current, target) is True


def test_received_case_cannot_jump_to_judged() -> None:
    with pytest.raises(InvalidStateError) as exc_info:
        ensure_transition_allowed(ProcessoStatus.RECEPCIONADO, ProcessoStatus.JULGADO)

    assert exc_info.value.details == {
        "status_atual": "RECEPCIONADO",
        "status_destino": "JULGADO",
    }


def test_concluded_case_is_terminal() -> None:
    assert not any(
        can_transition(ProcessoStatus.CONCLUIDO, target) for target in ProcessoStatus
    )
