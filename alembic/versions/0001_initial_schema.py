"""Create case registry, judgment and settlement tables.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


tipo_processo_enum = sa.Enum(
    "COMPENSACAO",
    "DACAO_PAGAMENTO",
    "TRANSACAO_EXCEPCIONAL",
    name="tipo_processo",
)
processo_status_enum = sa.Enum(
    "RECEPCIONADO",
    "EM_ANALISE",
    "EM_PAUTA",
    "SUSPENSO",
    "PEDIDO_VISTA",
    "PEDIDO_DILIGENCIA",
    "JULGADO",
    "ACORDO_FIRMADO",
    "EM_CUMPRIMENTO",
    "CONCLUIDO",
    name="processo_status",
)
pauta_status_enum = sa.Enum("aberta", "fechada", name="pauta_status")
tipo_resultado_enum = sa.Enum(
    "SUSPENSO",
    "PEDIDO_VISTA",
    "PEDIDO_DILIGENCIA",
    "JULGADO",
    name="tipo_resultado",
)
tipo_decisao_enum = sa.Enum("DEFERIDO", "INDEFERIDO", "PARCIAL", name="tipo_decisao")
tipo_voto_enum = sa.Enum("RELATOR", "REVISOR", "CONSELHEIRO", name="tipo_voto")
posicao_voto_enum = sa.Enum(
    "DEFERIDO",
    "INDEFERIDO",
    "PARCIAL",
    "ABSTENCAO",
    "AUSENTE",
    "IMPEDIDO",
    name="posicao_voto",
)
acordo_status_enum = sa.Enum(
    "ativo",
    "cumprido",
    "cancelado",
    "vencido",
    name="acordo_status",
)
tipo_detalhe_enum = sa.Enum("imovel", "credito", name="tipo_detalhe")
detalhe_status_enum = sa.Enum(
    "PENDENTE",
    "EM_EXECUCAO",
    "EXECUTADO",
    "CANCELADO",
    name="detalhe_status",
)
tipo_inscricao_enum = sa.Enum("imobiliaria", "economica", name="tipo_inscricao")
situacao_inscricao_enum = sa.Enum("pendente", "quitado", name="situacao_inscricao")
tipo_parcela_enum = sa.Enum("ENTRADA", "PARCELA_ACORDO", name="tipo_parcela")
parcela_status_enum = sa.Enum(
    "PENDENTE",
    "PAGO",
    "ATRASADO",
    "CANCELADO",
    name="parcela_status",
)
forma_pagamento_enum = sa.Enum(
    "dinheiro",
    "pix",
    "transferencia",
    "boleto",
    "cartao",
    "dacao",
    "compensacao",
    name="forma_pagamento",
)
tipo_historico_enum = sa.Enum(
    "ALTERACAO",
    "DECISAO",
    "PAUTA",
    "ACORDO",
    "ACORDO_CONCLUIDO",
    "PROCESSO_CONCLUIDO",
    name="tipo_historico",
)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "contribuintes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("nome", sa.String(length=200), nullable=False),
        sa.Column("documento", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("telefone", sa.String(length=30), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("documento", name="uq_contribuintes_documento"),
    )

    op.create_table(
        "processos",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("numero", sa.String(length=40), nullable=False),
        sa.Column("tipo", tipo_processo_enum, nullable=False),
        sa.Column("status", processo_status_enum, nullable=False),
        sa.Column("valor_original", sa.Numeric(14, 2), nullable=False),
        sa.Column("valor_negociado", sa.Numeric(14, 2), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("contribuinte_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contribuinte_id"], ["contribuintes.id"]),
        sa.UniqueConstraint("numero", name="uq_processos_numero"),
        sa.CheckConstraint(
            "valor_original >= 0",
            name="ck_processos_valor_original_non_negative",
        ),
    )

    op.create_table(
        "pautas",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("numero", sa.String(length=40), nullable=False),
        sa.Column("data_pauta", sa.Date(), nullable=False),
        sa.Column("descricao", sa.String(length=280), nullable=True),
        sa.Column("status", pauta_status_enum, nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("numero", name="uq_pautas_numero"),
    )

    op.create_table(
        "processos_pauta",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("pauta_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("processo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("ordem", sa.Integer(), nullable=False),
        sa.Column("relator", sa.String(length=200), nullable=True),
        sa.Column(
            "revisores",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("status_sessao", sa.String(length=40), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["pauta_id"], ["pautas.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["processo_id"], ["processos.id"]),
        sa.UniqueConstraint(
            "pauta_id",
            "processo_id",
            name="uq_processos_pauta_pauta_processo",
        ),
    )

    op.create_table(
        "sessoes_julgamento",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("pauta_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("data_inicio", sa.DateTime(timezone=True), nullable=False),
        sa.Column("data_fim", sa.DateTime(timezone=True), nullable=True),
        sa.Column("presidente", sa.String(length=200), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["pauta_id"], ["pautas.id"]),
        sa.UniqueConstraint("pauta_id", name="uq_sessoes_julgamento_pauta"),
    )

    op.create_table(
        "decisoes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sessao_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("processo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tipo_resultado", tipo_resultado_enum, nullable=False),
        sa.Column("tipo_decisao", tipo_decisao_enum, nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("conselheiro_pedido_vista", sa.String(length=200), nullable=True),
        sa.Column("prazo_vista", sa.Date(), nullable=True),
        sa.Column("especificacao_diligencia", sa.Text(), nullable=True),
        sa.Column("prazo_diligencia", sa.Date(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["sessao_id"], ["sessoes_julgamento.id"]),
        sa.ForeignKeyConstraint(["processo_id"], ["processos.id"]),
        sa.UniqueConstraint(
            "sessao_id",
            "processo_id",
            name="uq_decisoes_sessao_processo",
        ),
    )

    op.create_table(
        "votos",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("decisao_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tipo_voto", tipo_voto_enum, nullable=False),
        sa.Column("nome_votante", sa.String(length=200), nullable=False),
        sa.Column("posicao_voto", posicao_voto_enum, nullable=True),
        sa.Column("texto_voto", sa.Text(), nullable=True),
        sa.Column("ordem_apresentacao", sa.Integer(), nullable=True),
        sa.Column(
            "is_presidente",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["decisao_id"], ["decisoes.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "acordos",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("processo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("numero_termo", sa.String(length=20), nullable=False),
        sa.Column("valor_total", sa.Numeric(14, 2), nullable=False),
        sa.Column("valor_desconto", sa.Numeric(14, 2), nullable=False),
        sa.Column("valor_entrada", sa.Numeric(14, 2), nullable=False),
        sa.Column("valor_final", sa.Numeric(14, 2), nullable=False),
        sa.Column("numero_parcelas", sa.Integer(), nullable=False),
        sa.Column("data_assinatura", sa.Date(), nullable=False),
        sa.Column("data_vencimento", sa.Date(), nullable=False),
        sa.Column("status", acordo_status_enum, nullable=False),
        sa.Column("observacoes", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["processo_id"], ["processos.id"]),
        sa.UniqueConstraint("numero_termo", name="uq_acordos_numero_termo"),
        sa.CheckConstraint("valor_final > 0", name="ck_acordos_valor_final_positive"),
        sa.CheckConstraint(
            "valor_entrada >= 0 AND valor_entrada < valor_final",
            name="ck_acordos_valor_entrada_range",
        ),
        sa.CheckConstraint(
            "numero_parcelas >= 1",
            name="ck_acordos_numero_parcelas_positive",
        ),
    )
    op.create_index("ix_acordos_processo_status", "acordos", ["processo_id", "status"])

    op.create_table(
        "acordo_transacoes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("acordo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("custas_advocaticias", sa.Numeric(14, 2), nullable=True),
        sa.Column("custas_data_vencimento", sa.Date(), nullable=True),
        sa.Column("custas_data_pagamento", sa.Date(), nullable=True),
        sa.Column("honorarios_valor", sa.Numeric(14, 2), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["acordo_id"], ["acordos.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("acordo_id", name="uq_acordo_transacoes_acordo"),
    )

    op.create_table(
        "acordo_detalhes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("acordo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tipo", tipo_detalhe_enum, nullable=False),
        sa.Column("descricao", sa.String(length=280), nullable=False),
        sa.Column("valor", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", detalhe_status_enum, nullable=False),
        sa.Column("data_execucao", sa.DateTime(timezone=True), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["acordo_id"], ["acordos.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "acordo_inscricoes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("acordo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("acordo_detalhe_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("numero_inscricao", sa.String(length=60), nullable=False),
        sa.Column("tipo_inscricao", tipo_inscricao_enum, nullable=False),
        sa.Column("valor_debito", sa.Numeric(14, 2), nullable=False),
        sa.Column("situacao", situacao_inscricao_enum, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["acordo_id"], ["acordos.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["acordo_detalhe_id"],
            ["acordo_detalhes.id"],
            ondelete="SET NULL",
        ),
    )

    op.create_table(
        "parcelas",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("acordo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tipo_parcela", tipo_parcela_enum, nullable=False),
        sa.Column("numero", sa.Integer(), nullable=False),
        sa.Column("valor", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", parcela_status_enum, nullable=False),
        sa.Column("data_vencimento", sa.Date(), nullable=False),
        sa.Column("data_pagamento", sa.Date(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["acordo_id"], ["acordos.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "acordo_id",
            "tipo_parcela",
            "numero",
            name="uq_parcelas_acordo_tipo_numero",
        ),
        sa.CheckConstraint("valor > 0", name="ck_parcelas_valor_positive"),
        sa.CheckConstraint("numero >= 0", name="ck_parcelas_numero_non_negative"),
    )
    op.create_index(
        "ix_parcelas_status_vencimento",
        "parcelas",
        ["status", "data_vencimento"],
    )

    op.create_table(
        "pagamentos_parcela",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("parcela_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("valor_pago", sa.Numeric(14, 2), nullable=False),
        sa.Column("data_pagamento", sa.Date(), nullable=False),
        sa.Column("forma_pagamento", forma_pagamento_enum, nullable=False),
        sa.Column("numero_comprovante", sa.String(length=120), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("usuario_id", sa.String(length=120), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parcela_id"], ["parcelas.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "valor_pago > 0",
            name="ck_pagamentos_parcela_valor_pago_positive",
        ),
    )
    op.create_index(
        "ix_pagamentos_parcela_parcela_id",
        "pagamentos_parcela",
        ["parcela_id"],
    )

    op.create_table(
        "historicos_processo",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("processo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("usuario_id", sa.String(length=120), nullable=False),
        sa.Column("titulo", sa.String(length=200), nullable=False),
        sa.Column("descricao", sa.Text(), nullable=False),
        sa.Column("tipo", tipo_historico_enum, nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["processo_id"], ["processos.id"]),
    )
    op.create_index(
        "ix_historicos_processo_processo_created",
        "historicos_processo",
        ["processo_id", "created_at"],
    )

    op.create_table(
        "logs_auditoria",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("usuario_id", sa.String(length=120), nullable=False),
        sa.Column("acao", sa.String(length=60), nullable=False),
        sa.Column("entidade", sa.String(length=60), nullable=False),
        sa.Column("entidade_id", sa.String(length=64), nullable=False),
        sa.Column(
            "dados_anteriores",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column("dados_novos", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_logs_auditoria_entidade",
        "logs_auditoria",
        ["entidade", "entidade_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_logs_auditoria_entidade", table_name="logs_auditoria")
    op.drop_table("logs_auditoria")
    op.drop_index(
        "ix_historicos_processo_processo_created",
        table_name="historicos_processo",
    )
    op.drop_table("historicos_processo")
    op.drop_index(
        "ix_pagamentos_parcela_parcela_id",
        table_name="pagamentos_parcela",
    )
    op.drop_table("pagamentos_parcela")
    op.drop_index("ix_parcelas_status_vencimento", table_name="parcelas")
    op.drop_table("parcelas")
    op.drop_table("acordo_inscricoes")
    op.drop_table("acordo_detalhes")
    op.drop_table("acordo_transacoes")
    op.drop_index("ix_acordos_processo_status", table_name="acordos")
    op.drop_table("acordos")
    op.drop_table("votos")
    op.drop_table("decisoes")
    op.drop_table("sessoes_julgamento")
    op.drop_table("processos_pauta")
    op.drop_table("pautas")
    op.drop_table("processos")
    op.drop_table("contribuintes")

    bind = op.get_bind()
    for enum_type in (
        tipo_historico_enum,
        forma_pagamento_enum,
        parcela_status_enum,
        tipo_parcela_enum,
        situacao_inscricao_enum,
        tipo_inscricao_enum,
        detalhe_status_enum,
        tipo_detalhe_enum,
        acordo_status_enum,
        posicao_voto_enum,
        tipo_voto_enum,
        tipo_decisao_enum,
        tipo_resultado_enum,
        pauta_status_enum,
        processo_status_enum,
        tipo_processo_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
