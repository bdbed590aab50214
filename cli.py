"""CLI commands for the Halloween party RSVP service."""

import asyncio
import json
from pathlib import Path

import typer
import uvicorn

from src.admin.access_gate import AdminAccessGate, UnlockOutcome
from src.config.database import engine, init_local_store
from src.config.logging import setup_logging
from src.config.settings import settings
from src.email_service import get_email_service
from src.invitation.reveal import LetterReveal, RevealState
from src.reminders.composer import ReminderComposer
from src.rsvps.aggregation import (
    build_category_summary,
    build_export,
    compute_totals,
    export_filename,
)
from src.rsvps.dtos import CategorySummary, StorageMode, StorageUnavailableError
from src.rsvps.repository.gateway import get_rsvp_gateway

app = typer.Typer(help="CLI commands for Halloween party RSVP management")

REVEAL_MESSAGES = {
    RevealState.DELIVERING: "An owl is on its way with your letter...",
    RevealState.DELIVERED_UNOPENED: "A letter has arrived from Hogwarts.",
    RevealState.OPENING: "Breaking the wax seal...",
    RevealState.OPENED: "You're Invited!",
}


def _run(coro):
    """Run a coroutine against an initialized local store."""

    async def _with_store():
        await init_local_store()
        try:
            return await coro
        finally:
            await engine.dispose()

    try:
        return asyncio.run(_with_store())
    except StorageUnavailableError as e:
        typer.secho(f"RSVP storage unavailable: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)


def _echo_summary(summary: CategorySummary) -> None:
    for label, items in (("Drinks", summary.drinks), ("Snacks", summary.snacks), ("Other", summary.other)):
        typer.secho(f"{label}:", fg=typer.colors.GREEN)
        if not items:
            typer.echo("  (nothing yet)")
        for item in items:
            typer.echo(f"  - {item}")


def _echo_storage(storage: StorageMode) -> None:
    if storage == StorageMode.LOCAL:
        typer.secho("Using local fallback store (remote store unavailable)", fg=typer.colors.YELLOW)
    else:
        typer.secho("Using remote store", fg=typer.colors.BLUE)


@app.command()
def open_letter():
    """Play the letter delivery and opening sequence in the terminal."""

    def show(state: RevealState) -> None:
        if state in REVEAL_MESSAGES:
            typer.secho(REVEAL_MESSAGES[state], fg=typer.colors.MAGENTA)

    async def _reveal():
        reveal = LetterReveal(
            on_state_change=show,
            on_opened=lambda: typer.secho(
                f"{settings.party_name} - {settings.party_date} at {settings.party_time}, "
                f"{settings.party_address}",
                fg=typer.colors.CYAN,
            ),
            delivery_seconds=settings.letter_delivery_seconds,
            opening_seconds=settings.letter_opening_seconds,
        )
        await reveal.deliver()
        await asyncio.to_thread(typer.prompt, "Press enter to open the letter", default="", show_default=False)
        await reveal.click()

    asyncio.run(_reveal())


@app.command()
def admin():
    """Unlock the admin dashboard and print RSVP totals.

    The password prompt is a soft lock for convenience, not access control.
    """
    gate = AdminAccessGate(
        password_hash=settings.admin_password_hash,
        max_attempts=settings.admin_max_attempts,
        close_delay_seconds=settings.admin_lockout_close_seconds,
        on_close=lambda: typer.secho("Closing admin prompt.", fg=typer.colors.RED),
    )

    while True:
        password = typer.prompt("Admin password", hide_input=True)
        attempt = gate.submit(password)
        if attempt.outcome == UnlockOutcome.GRANTED:
            break
        typer.secho(attempt.message, fg=typer.colors.RED)
        if attempt.outcome == UnlockOutcome.LOCKED:
            asyncio.run(gate.close_after_lockout())
            raise typer.Exit(1)

    async def _dashboard():
        gateway = get_rsvp_gateway()
        return await gateway.read_records()

    result = _run(_dashboard())
    totals = compute_totals(result.records)
    _echo_storage(result.storage)
    typer.secho(f"Attending: {totals.attending_count}", fg=typer.colors.GREEN)
    typer.secho(f"Total guests: {totals.total_guests}", fg=typer.colors.GREEN)
    typer.secho(f"Not attending: {totals.not_attending_count}", fg=typer.colors.YELLOW)
    _echo_summary(build_category_summary(result.records))


@app.command()
def list_rsvps():
    """List every stored RSVP."""
    result = _run(get_rsvp_gateway().read_records())
    _echo_storage(result.storage)
    for record in result.records:
        status = "attending" if record.attending else "not attending"
        typer.echo(
            f"{record.id}  {record.name} <{record.email}>  {status}, "
            f"{record.guest_count} guest(s)"
        )
    typer.secho(f"{len(result.records)} RSVP(s)", fg=typer.colors.CYAN)


@app.command()
def summary():
    """Show what attending guests are bringing."""
    _echo_summary(_run(get_rsvp_gateway().category_summary()))


@app.command()
def export(
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="File to write, defaults to halloween-party-rsvps-<date>.json",
    ),
):
    """Export all RSVPs with the summary and totals as JSON."""
    records = _run(get_rsvp_gateway().list_records())
    output = output or Path(export_filename())
    output.write_text(json.dumps(build_export(records), indent=2))
    typer.secho(f"Exported {len(records)} RSVP(s) to {output}", fg=typer.colors.GREEN)


@app.command()
def delete(
    rsvp_id: str = typer.Argument(..., help="Id of the RSVP to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete one RSVP. This cannot be undone."""
    if not yes:
        typer.confirm(f"Delete RSVP {rsvp_id}? This action cannot be undone.", abort=True)
    result = _run(get_rsvp_gateway().delete_record(rsvp_id))
    if not result.deleted:
        typer.secho(f"RSVP {rsvp_id} not found", fg=typer.colors.YELLOW)
        raise typer.Exit(1)
    typer.secho(f"Deleted RSVP {rsvp_id} from {result.storage.value} store", fg=typer.colors.GREEN)


@app.command()
def send_reminders(
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the reminders instead of sending"),
):
    """Send reminder emails to every attending guest."""
    records = _run(get_rsvp_gateway().list_records())
    composer = ReminderComposer(email_service=get_email_service(), config=settings)

    if dry_run:
        for preview in composer.build_previews(records):
            typer.secho(f"To: {preview.recipient}", fg=typer.colors.BLUE)
            typer.secho(f"Subject: {preview.subject}", fg=typer.colors.BLUE)
            typer.echo(preview.text_body)
            typer.echo()
        return

    attending = [record for record in records if record.attending]
    if not attending:
        typer.secho("No attending guests to send reminders to.", fg=typer.colors.YELLOW)
        return
    typer.confirm(f"Send reminder emails to {len(attending)} attending guests?", abort=True)

    results = _run(composer.send_all(records))
    for result in results:
        if result.success:
            typer.secho(f"  sent to {result.recipient}", fg=typer.colors.GREEN)
        else:
            typer.secho(f"  failed for {result.recipient}: {result.error}", fg=typer.colors.RED)


@app.command()
def storage_status():
    """Show which RSVP store is configured."""
    gateway = get_rsvp_gateway()
    _echo_storage(gateway.storage_mode)
    fallback = "enabled" if settings.storage_fallback_enabled else "disabled"
    typer.echo(f"Local fallback: {fallback}")


@app.command()
def serve(reload: bool = typer.Option(False, "--reload", help="Restart on code changes")):
    """Run the RSVP API server."""
    uvicorn.run("src.main:app", host=settings.app_host, port=settings.app_port, reload=reload)


@app.command("init-local-store")
def init_store():
    """Create the local fallback store tables."""
    asyncio.run(init_local_store())
    typer.secho("Local store ready", fg=typer.colors.GREEN)


if __name__ == "__main__":
    setup_logging()
    app()
