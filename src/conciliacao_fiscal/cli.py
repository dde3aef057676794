"""CLI bootstrap for conciliacao-fiscal."""

from datetime import date, datetime

import typer

from conciliacao_fiscal.api.dependencies import build_inadimplencia_service
from conciliacao_fiscal.core.logging import configure_logging
from conciliacao_fiscal.core.settings import get_settings
from conciliacao_fiscal.db.session import SessionFactory
from conciliacao_fiscal.domain.dates import today_local
from conciliacao_fiscal.domain.errors import DomainError
from conciliacao_fiscal.domain.money import format_brl
from conciliacao_fiscal.services.acordo_completion import SYSTEM_USER_ID

app = typer.Typer(help="CLI for fiscal settlement agreement maintenance.")
DATA_OPTION = typer.Option(
    None,
    "--data",
    formats=["%Y-%m-%d"],
    help="Data de referência (padrão: hoje no fuso configurado).",
)
DIAS_OPTION = typer.Option(0, "--dias", min=0, help="Dias mínimos de atraso.")


def _reference_date(value: datetime | None) -> date:
    return value.date() if value is not None else today_local()


@app.callback()
def setup() -> None:
    configure_logging(get_settings().log_level)


@app.command("healthcheck")
def healthcheck() -> None:
    """Verify that the CLI entrypoint is available."""
    typer.echo("conciliacao-fiscal is ready")


@app.command("atualizar-parcelas")
def atualizar_parcelas(data: datetime | None = DATA_OPTION) -> None:
    """Mark past-due installments ATRASADO and their agreements vencido."""
    hoje = _reference_date(data)
    with SessionFactory() as session:
        service = build_inadimplencia_service(session)
        result = service.atualizar_status_parcelas(
            hoje=hoje,
            usuario_id=SYSTEM_USER_ID,
        )
    typer.echo(f"Referência: {hoje.isoformat()}")
    typer.echo(
        f"Parcelas atualizadas: {result.parcelas_atualizadas} | "
        f"Acordos vencidos: {result.acordos_atualizados}"
    )


@app.command("relatorio-vencidas")
def relatorio_vencidas(
    dias: int = DIAS_OPTION,
    data: datetime | None = DATA_OPTION,
) -> None:
    """Print overdue installments with late charges."""
    hoje = _reference_date(data)
    with SessionFactory() as session:
        service = build_inadimplencia_service(session)
        try:
            items = service.relatorio_parcelas_vencidas(hoje=hoje, dias=dias)
        except DomainError as exc:
            typer.echo(exc.message, err=True)
            raise typer.Exit(code=1) from exc

        typer.echo(f"Parcelas vencidas em {hoje.isoformat()}: {len(items)}")
        for item in items:
            parcela = item.row.parcela
            typer.echo(
                f"{item.row.processo.numero} | {item.row.acordo.numero_termo} | "
                f"parcela {parcela.numero} | {item.dias_vencido} dias | "
                f"restante {format_brl(item.valor_restante)} | "
                f"atualizado {format_brl(item.encargos.total)} | "
                f"{item.row.contribuinte.nome}"
            )


def main() -> None:
    """Run the conciliacao-fiscal CLI application."""
    app()


if __name__ == "__main__":
    main()
