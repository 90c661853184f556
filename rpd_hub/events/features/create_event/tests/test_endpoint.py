import pytest
from sqlalchemy import func, select

from rpd_hub.config.database import async_session_manager
from rpd_hub.config.settings import Settings
from rpd_hub.email_service import SMTPNotificationSender, get_notification_sender
from rpd_hub.email_service.tests.fake_smtp import make_fake_smtp
from rpd_hub.events.dtos import NewEventDTO
from rpd_hub.events.features.create_event.router import get_event_write_model
from rpd_hub.events.features.create_event.write_model import EventWriteModel
from rpd_hub.events.repository.orm_models import Event
from rpd_hub.events.urls import EVENTS_URL

EVENT_PAYLOAD = {
    "title": "Hongdae Friday RPD",
    "description": "Meet at the busking zone",
    "playlist": "Stray Kids, TWICE",
    "format": "memory",
    "location": "Hongdae, Seoul",
    "date": "2026-11-20",
    "time": "19:30",
    "video_recorded": False,
    "proficiency": "mid",
    "artist_type": "mixed",
    "creator_email": "host@example.com",
}


class InMemoryEventWriteModel(EventWriteModel):
    """In-memory write model for testing."""

    def __init__(self, memory: list):
        self._memory = memory

    async def create_event(self, new_event: NewEventDTO) -> int:
        self._memory.append(new_event)
        return len(self._memory)


class RefusingSMTP:
    """Stands in for a relay that is down."""

    def __init__(self, host, port, timeout=None, context=None):
        raise ConnectionRefusedError(111, "Connection refused")


async def _count_events() -> int:
    async with async_session_manager() as session:
        return (await session.execute(select(func.count(Event.id)))).scalar_one()


@pytest.mark.asyncio
async def test_create_event(client_factory):
    """Test posting an event hands every field to the write model."""
    memory = []
    overrides = {get_event_write_model: lambda: InMemoryEventWriteModel(memory)}

    async with client_factory(overrides) as client:
        response = await client.post(EVENTS_URL, json=EVENT_PAYLOAD)

    assert response.status_code == 200
    assert response.json() == {"id": 1}
    [new_event] = memory
    assert new_event.title == "Hongdae Friday RPD"
    assert new_event.format == "memory"
    assert new_event.proficiency == "mid"
    assert new_event.artist_type == "mixed"
    assert new_event.creator_email == "host@example.com"


@pytest.mark.asyncio
async def test_create_event_stores_and_lists(client, notification_sender):
    """Test a posted event shows up in the listing with no RSVPs."""
    response = await client.post(EVENTS_URL, json=EVENT_PAYLOAD)
    assert response.status_code == 200
    event_id = response.json()["id"]

    listing = await client.get(EVENTS_URL)

    assert listing.status_code == 200
    [event] = listing.json()
    assert event["id"] == event_id
    assert event["rsvp_count"] == 0
    assert event["creator_email"] == "host@example.com"
    assert len(notification_sender.sent_to("host@example.com")) == 1


@pytest.mark.asyncio
async def test_create_event_missing_creator_email(client):
    """Test a post without creator email is rejected and stores nothing."""
    payload = {**EVENT_PAYLOAD}
    del payload["creator_email"]

    response = await client.post(EVENTS_URL, json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Creator email is required"}
    assert await _count_events() == 0


@pytest.mark.asyncio
async def test_create_event_missing_title(client):
    response = await client.post(EVENTS_URL, json={**EVENT_PAYLOAD, "title": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
    assert await _count_events() == 0


@pytest.mark.asyncio
async def test_create_event_rejects_unknown_proficiency(client):
    """Test a value outside the proficiency choices is a 400."""
    response = await client.post(EVENTS_URL, json={**EVENT_PAYLOAD, "proficiency": "expert"})

    assert response.status_code == 400
    assert "proficiency" in response.json()["error"]
    assert await _count_events() == 0


@pytest.mark.asyncio
async def test_create_event_with_unreachable_relay(client_factory):
    """Test the event is created even when the mail relay refuses connections."""
    config = Settings(
        _env_file=None,
        smtp_host="smtp.invalid",
        smtp_port=587,
        smtp_user="relay-user",
        smtp_pass="relay-pass",
    )
    sender = SMTPNotificationSender(config=config, smtp_class=RefusingSMTP)
    overrides = {get_notification_sender: lambda: sender}

    async with client_factory(overrides) as client:
        response = await client.post(EVENTS_URL, json=EVENT_PAYLOAD)

    assert response.status_code == 200
    assert response.json()["id"] >= 1
    assert await _count_events() == 1



@pytest.mark.asyncio
async def test_create_event_title_with_line_break(client_factory):
    """Test a title carrying an extra header line is stored and mailed safely."""
    config = Settings(
        _env_file=None,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="relay-user",
        smtp_pass="relay-pass",
    )
    smtp = make_fake_smtp()
    sender = SMTPNotificationSender(config=config, smtp_class=smtp)
    overrides = {get_notification_sender: lambda: sender}

    async with client_factory(overrides) as client:
        response = await client.post(
            EVENTS_URL, json={**EVENT_PAYLOAD, "title": "RPD\nBcc: spam@x.com"}
        )

    assert response.status_code == 200
    assert await _count_events() == 1
    [session] = smtp.sessions
    [msg] = session.messages
    assert msg["Bcc"] is None
    assert b"\nBcc:" not in msg.as_bytes()


class CrashingEventWriteModel(EventWriteModel):
    async def create_event(self, new_event: NewEventDTO) -> int:
        raise RuntimeError("driver went away")


@pytest.mark.asyncio
async def test_create_event_unexpected_error(client_factory):
    """Test an unexpected failure still answers with the JSON error body."""
    overrides = {get_event_write_model: lambda: CrashingEventWriteModel()}

    async with client_factory(overrides, raise_app_exceptions=False) as client:
        response = await client.post(EVENTS_URL, json=EVENT_PAYLOAD)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
