from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional
from uuid import UUID

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from history_excerptor.clients.digital_seal import DigitalSealClient
from history_excerptor.clients.excerpt import ExcerptClient
from history_excerptor.clients.schemas import ExcerptProcessingStatus
from history_excerptor.clients.storage import S3ObjectStorage
from history_excerptor.config.settings import Settings, get_settings
from history_excerptor.db.engine import build_engine, ping_db
from history_excerptor.errors import HistoryExcerptorError
from history_excerptor.models.domain import HistoryExcerptData
from history_excerptor.observability.logging import bind_context, clear_context, configure_logging
from history_excerptor.repos.history_table_repo import HistoryTableSelectRepo
from history_excerptor.services.digital_signature import DigitalSignatureService
from history_excerptor.services.excerpt_service import ExcerptService
from history_excerptor.services.history_excerptor import HistoryExcerptorService

app = typer.Typer(help="History excerptor CLI (read history trails, generate signed excerpts).")
console = Console()


@app.callback()
def _setup() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        _fail(e)
    configure_logging(settings.log_level, settings.log_format)


def _fail(e: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {e}")
    raise typer.Exit(code=1)


def _excerpt_client(settings: Settings) -> ExcerptClient:
    return ExcerptClient(settings.excerpt_base_url, timeout_s=settings.http_timeout_s)


def _excerpt_service(settings: Settings, excerpt_client: ExcerptClient) -> ExcerptService:
    signature_service = DigitalSignatureService(
        request_signature_bucket=settings.request_signature_bucket,
        digital_seal_client=DigitalSealClient(
            settings.digital_seal_base_url, timeout_s=settings.http_timeout_s
        ),
        storage=S3ObjectStorage(
            endpoint_url=settings.storage_endpoint_url,
            region=settings.storage_region,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
        ),
    )
    return ExcerptService(
        excerpt_status_check_max_attempts=settings.excerpt_status_check_max_attempts,
        excerpt_client=excerpt_client,
        digital_signature_service=signature_service,
    )


def render_history(data: HistoryExcerptData, title: str) -> Table:
    table = Table(title=title)
    table.add_column("created_at", style="cyan")
    table.add_column("created_by", style="green")
    table.add_column("dml_op", style="magenta")
    for name in data.operational_table_columns:
        table.add_column(name)

    for row in data.rows:
        ddm = row.ddm_info
        table.add_row(
            ddm.created_at or "",
            ddm.created_by or "",
            ddm.dml_op or "",
            *[
                row.operational_table_data[name].value or ""
                for name in data.operational_table_columns
            ],
        )
    return table


@app.command("ping-db")
def ping_db_cmd() -> None:
    result = ping_db(build_engine())
    if not result.ok:
        console.print(f"[red]Database unreachable:[/red] {result.detail}")
        raise typer.Exit(code=1)
    typer.echo("✅ Database reachable.")


@app.command("history")
def history_cmd(
    table: str = typer.Option(..., help="Registry table name (without history suffix)."),
    record_id: UUID = typer.Option(..., "--id", help="Record identifier."),
    search_column: Optional[str] = typer.Option(
        None, help="Query <table> directly by this column instead of <table>_hst/<table>_id."
    ),
) -> None:
    """Print the history trail of a record, newest entry first."""
    settings = get_settings()
    repo = HistoryTableSelectRepo(build_engine(), history_table_suffix=settings.history_table_suffix)
    try:
        if search_column:
            data = repo.get_history_data(table, search_column, record_id)
        else:
            data = repo.get_record_history(table, record_id)
    except HistoryExcerptorError as e:
        _fail(e)

    console.print(render_history(data, title=f"History of {table} {record_id}"))


@app.command("excerpt")
def excerpt_cmd(
    table: str = typer.Option(..., help="Registry table name (without history suffix)."),
    record_id: UUID = typer.Option(..., "--id", help="Record identifier."),
    output: Optional[Path] = typer.Option(None, help="Where to save the document when completed."),
) -> None:
    """Generate a signed history excerpt and wait for the generator to finish."""
    settings = get_settings()
    bind_context(table_name=table, record_id=str(record_id))

    excerpt_client = _excerpt_client(settings)
    service = HistoryExcerptorService(
        history_repo=HistoryTableSelectRepo(
            build_engine(), history_table_suffix=settings.history_table_suffix
        ),
        excerpt_service=_excerpt_service(settings, excerpt_client),
        excerpt_client=excerpt_client,
        excerpt_type=settings.excerpt_type,
        requires_system_signature=settings.excerpt_requires_system_signature,
    )

    try:
        outcome = service.excerpt(table, record_id)
        typer.echo(f"✅ excerpt_id={outcome.excerpt_id}")
        typer.echo(f"✅ status={outcome.status.status}")
        if outcome.status.status_details:
            typer.echo(f"details={outcome.status.status_details}")

        if output is not None and outcome.status.status == ExcerptProcessingStatus.COMPLETED.value:
            output.write_bytes(service.download(outcome.excerpt_id))
            typer.echo(f"✅ Saved excerpt to {output}")
    except (HistoryExcerptorError, httpx.HTTPError) as e:
        _fail(e)
    finally:
        excerpt_client.close()
        clear_context()


@app.command("status")
def status_cmd(
    excerpt_id: UUID = typer.Option(..., help="Excerpt identifier returned by `excerpt`."),
) -> None:
    """Print the current status of an excerpt once (no polling)."""
    settings = get_settings()
    client = _excerpt_client(settings)
    try:
        status = client.status(excerpt_id)
    except httpx.HTTPError as e:
        _fail(e)
    finally:
        client.close()
    typer.echo(f"status={status.status}")
