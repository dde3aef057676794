"""ORM models for the conciliacao_fiscal domain."""

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
from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.decisao import (
    Decisao,
    PosicaoVoto,
    TipoDecisao,
    TipoResultado,
    TipoVoto,
    Voto,
)
from conciliacao_fiscal.db.models.historico import (
    HistoricoProcesso,
    LogAuditoria,
    TipoHistorico,
)
from conciliacao_fiscal.db.models.parcela import (
    FormaPagamento,
    PagamentoParcela,
    Parcela,
    ParcelaStatus,
    TipoParcela,
)
from conciliacao_fiscal.db.models.pauta import (
    Pauta,
    PautaStatus,
    ProcessoPauta,
    SessaoJulgamento,
)
from conciliacao_fiscal.db.models.processo import (
    Processo,
    ProcessoStatus,
    TipoProcesso,
)

__all__ = [
    "Acordo",
    "AcordoDetalhe",
    "AcordoHonorarios",
    "AcordoInscricao",
    "AcordoStatus",
    "AcordoTransacao",
    "Contribuinte",
    "Decisao",
    "DetalheStatus",
    "FormaPagamento",
    "HistoricoProcesso",
    "LogAuditoria",
    "PagamentoParcela",
    "Parcela",
    "ParcelaStatus",
    "Pauta",
    "PautaStatus",
    "PosicaoVoto",
    "Processo",
    "ProcessoPauta",
    "ProcessoStatus",
    "SessaoJulgamento",
    "SituacaoInscricao",
    "TipoDecisao",
    "TipoDetalhe",
    "TipoHistorico",
    "TipoInscricao",
    "TipoParcela",
    "TipoProcesso",
    "TipoResultado",
    "TipoVoto",
    "Voto",
]
