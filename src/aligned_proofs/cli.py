"""
aligned-proofs CLI entry point.

Usage:
    aligned-proofs [OPTIONS] COMMAND [ARGS]...
"""
from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .clients import AlignedClient, ProofClient, SimulatedProofClient
from .config import AlignedSettings, get_settings, validate_settings
from .exceptions import ConfigurationError
from .logging_config import setup_logging
from .models import JobState
from .workflow import ProofWorkflow, WorkflowResult

console = Console()

_TERMINAL_STATES = {JobState.COMPLETED.value, JobState.FAILED.value}

_STATUS_STYLE = {
    JobState.PENDING.value: "yellow",
    JobState.PROCESSING.value: "cyan",
    JobState.COMPLETED.value: "green",
    JobState.FAILED.value: "red",
    JobState.UNKNOWN.value: "magenta",
}


@click.group()
@click.version_option(message="%(prog)s %(version)s", package_name="aligned-proofs")
@click.option("--api-url", envvar="ALIGNED_API_BASE_URL", help="Proof network API base URL")
@click.option("--api-key", envvar="ALIGNED_API_KEY", help="API key")
@click.option("--simulate", is_flag=True, help="Use an in-memory proof network instead of the API")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, api_url: Optional[str], api_key: Optional[str], simulate: bool, verbose: bool):
    """Submit proofs to the Aligned network and track their verification."""
    ctx.ensure_object(dict)

    settings = get_settings()
    overrides = {}
    if api_url:
        overrides["api_base_url"] = api_url.rstrip("/")
    if api_key:
        overrides["api_key"] = api_key
    if simulate:
        overrides["settlement_delay_seconds"] = 0.0
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging("DEBUG" if verbose else settings.log_level, json_format=settings.log_json)

    ctx.obj["settings"] = settings
    ctx.obj["simulate"] = simulate


def _build_client(ctx) -> ProofClient:
    settings: AlignedSettings = ctx.obj["settings"]
    if ctx.obj["simulate"]:
        return SimulatedProofClient()
    try:
        validate_settings(settings)
    except ConfigurationError as e:
        raise click.ClickException(e.message) from e
    return AlignedClient.from_settings(settings)


async def _close(client: ProofClient) -> None:
    if isinstance(client, AlignedClient):
        await client.close()


def _print_result(result: WorkflowResult) -> None:
    if result.success:
        console.print(f"\n[green]✓[/green] {result.message}")
    else:
        console.print(f"\n[red]✗ {result.message}[/red]")


@cli.command()
@click.option("--proof", required=True, help="Proof data (hex or base64 string)")
@click.option("--identifier", help="Billing identifier hex (0x optional, zero-padded to 32 bytes)")
@click.option("--watch", is_flag=True, help="Poll the job until it completes or fails")
@click.option("--interval", default=2.0, show_default=True, type=float, help="Seconds between status polls")
@click.option("--max-polls", default=30, show_default=True, type=int, help="Give up watching after this many polls")
@click.pass_context
def submit(
    ctx,
    proof: str,
    identifier: Optional[str],
    watch: bool,
    interval: float,
    max_polls: int,
):
    """Submit a proof, topping up the identifier's balance if needed."""
    settings: AlignedSettings = ctx.obj["settings"]
    client = _build_client(ctx)
    workflow = ProofWorkflow.from_settings(settings, client)

    async def run() -> WorkflowResult:
        try:
            with console.status("Submitting proof..."):
                result = await workflow.submit_proof(proof, identifier)
            _print_result(result)
            if result.success:
                console.print(f"  Identifier: [cyan]{result.data['identifier']}[/cyan]")
                if result.data.get("topped_up"):
                    top_up = result.data["top_up"]
                    console.print(f"  Top-up: {top_up['amount']} (tx {top_up['tx_hash'] or top_up['status']})")
                if watch:
                    await _watch(workflow, result.data["job_id"], interval, max_polls)
            return result
        finally:
            await _close(client)

    result = asyncio.run(run())
    if not result.success:
        ctx.exit(1)


async def _watch(workflow: ProofWorkflow, job_id: str, interval: float, max_polls: int) -> None:
    for _ in range(max_polls):
        result = await workflow.get_proof_status(job_id)
        if not result.success:
            _print_result(result)
            return
        status = result.data["status"]
        console.print(f"  [{_STATUS_STYLE.get(status, 'white')}]{status}[/]")
        if status in _TERMINAL_STATES:
            _print_status(result)
            return
        await asyncio.sleep(interval)
    console.print(f"[yellow]Job {job_id} still running after {max_polls} polls[/yellow]")


def _print_status(result: WorkflowResult) -> None:
    data = result.data
    table = Table(title=f"Proof job {data['job_id']}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Status", f"[{_STATUS_STYLE.get(data['status'], 'white')}]{data['status']}[/]")
    table.add_row("Request ID", data.get("request_id") or "-")
    if data.get("additional_info"):
        table.add_row("Additional info", data["additional_info"])
    if data.get("error"):
        table.add_row("Error", f"[red]{data['error']}[/red]")
    console.print(table)


@cli.command()
@click.argument("job_id")
@click.pass_context
def status(ctx, job_id: str):
    """Get the verification status of a submitted proof.

    Not available with --simulate: simulated jobs only live for one
    command, so use ``submit --watch`` instead.
    """
    if ctx.obj["simulate"]:
        raise click.UsageError(
            "status is not available with --simulate; simulated jobs do not outlive "
            "one command, use 'submit --watch' instead"
        )
    client = _build_client(ctx)
    workflow = ProofWorkflow.from_settings(ctx.obj["settings"], client)

    async def run() -> WorkflowResult:
        try:
            return await workflow.get_proof_status(job_id)
        finally:
            await _close(client)

    result = asyncio.run(run())
    if not result.success:
        _print_result(result)
        ctx.exit(1)
    _print_status(result)


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the effective configuration."""
    settings: AlignedSettings = ctx.obj["settings"]

    console.print("\n[bold blue]aligned-proofs configuration[/bold blue]\n")
    console.print(f"Environment: [cyan]{settings.environment}[/cyan]")
    console.print(f"API URL: [cyan]{settings.api_base_url}[/cyan]")

    api_key = settings.api_key
    if api_key:
        masked = api_key[:8] + "..." + api_key[-4:] if len(api_key) > 12 else "***"
        console.print(f"API Key: [green]{masked}[/green]")
    else:
        console.print("API Key: [yellow]Not configured[/yellow]")

    console.print(f"Identifier: [cyan]{settings.identifier or 'auto (discover or create)'}[/cyan]")
    console.print(f"Submission threshold: {Decimal(settings.submission_threshold)}")
    console.print(f"Settlement delay: {settings.settlement_delay_seconds}s")
    console.print(f"Require settled balance: {settings.require_settled_balance}")
    if ctx.obj["simulate"]:
        console.print("[yellow]Simulation mode: no network calls are made[/yellow]")
    console.print()


if __name__ == "__main__":
    cli()
