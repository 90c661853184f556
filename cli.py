"""CLI commands for RPD Hub management."""

import asyncio

import typer
import uvicorn

from rpd_hub.config.database import run_migrations
from rpd_hub.config.settings import settings
from rpd_hub.email_service import get_notification_sender
from rpd_hub.events.dtos import EventFilters
from rpd_hub.events.repository.read_models import SqlEventReadModel, SqlRSVPReadModel

app = typer.Typer(help="CLI commands for RPD Hub management")


@app.command()
def serve(
    host: str = typer.Option(settings.app_host, "--host", help="Interface to listen on"),
    port: int = typer.Option(settings.app_port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Run the API server."""
    uvicorn.run("rpd_hub.main:app", host=host, port=port, reload=reload)


@app.command()
def migrate():
    """Create or upgrade the database schema."""
    asyncio.run(run_migrations())
    typer.secho("Database schema is up to date.", fg=typer.colors.GREEN)


@app.command()
def list_events(
    q: str = typer.Option(None, "--query", "-q", help="Text in title, description or playlist"),
    location: str = typer.Option(None, "--location", "-l", help="Part of the location"),
    proficiency: str = typer.Option(None, "--proficiency", help="beginner, mid or pro"),
    artist_type: str = typer.Option(None, "--artist-type", help="girl_group, boy_group or mixed"),
):
    """List events, soonest first, with their RSVP counts."""
    filters = EventFilters(
        q=q,
        location=location,
        proficiency=proficiency,
        artist_type=artist_type,
    )
    events = asyncio.run(SqlEventReadModel().list_events(filters))

    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW)
        return

    for event in events:
        typer.secho(f"[{event.id}] {event.title}", fg=typer.colors.GREEN)
        typer.secho(f"  When: {event.date} {event.time}", fg=typer.colors.BLUE)
        typer.secho(f"  Where: {event.location}", fg=typer.colors.BLUE)
        typer.secho(
            f"  Level: {event.proficiency or 'N/A'} | Artists: {event.artist_type or 'N/A'}",
            fg=typer.colors.CYAN,
        )
        typer.secho(f"  Creator: {event.creator_email}", fg=typer.colors.CYAN)
        typer.secho(f"  RSVPs: {event.rsvp_count}", fg=typer.colors.MAGENTA)


@app.command()
def list_rsvps(
    event_id: int = typer.Argument(
        ...,
        help="Event id",
    ),
):
    """Show who RSVP'd for an event."""
    entries = asyncio.run(SqlRSVPReadModel().list_for_event(event_id))

    if not entries:
        typer.secho(f"No RSVPs for event {event_id}", fg=typer.colors.YELLOW)
        return

    typer.secho(f"{len(entries)} RSVP(s) for event {event_id}:", fg=typer.colors.GREEN)
    for entry in entries:
        typer.secho(f"  - {entry.email} ({entry.created_at})", fg=typer.colors.BLUE)


@app.command()
def send_test_email(
    address: str = typer.Argument(
        ...,
        help="Where to send the test email",
    ),
):
    """Send a test email through the configured SMTP relay."""
    result = asyncio.run(get_notification_sender().send_test_email(address))

    if result.success:
        typer.secho(f"Test email sent! Message-ID: {result.message_id}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Failed: {result.error}", fg=typer.colors.RED)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
