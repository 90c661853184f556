"""Tests for SqlRSVPWriteModel."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from rpd_hub.email_service.tests.inmemory_sender import InMemoryNotificationSender
from rpd_hub.events.dtos import DuplicateError, StoreError, ValidationError
from rpd_hub.events.features.create_rsvp.write_model import SqlRSVPWriteModel
from rpd_hub.events.repository.read_models import SqlRSVPReadModel
from rpd_hub.events.repository.tests.factories import add_event


class RacingRSVPWriteModel(SqlRSVPWriteModel):
    """Skips the pre-insert lookup, as if another request won the race."""

    async def _rsvp_exists(self, session, event_id: int, email: str) -> bool:
        return False


@pytest.mark.asyncio
async def test_create_rsvp_returns_new_count(db_engine):
    event_id = await add_event()
    write_model = SqlRSVPWriteModel()

    first = await write_model.create_rsvp(event_id, "a@example.com", "10.0.0.1")
    second = await write_model.create_rsvp(event_id, "b@example.com", "10.0.0.2")

    assert first == 1
    assert second == 2


@pytest.mark.asyncio
async def test_create_rsvp_duplicate_email(db_engine):
    """Test the same email cannot RSVP twice and the count does not move."""
    event_id = await add_event()
    write_model = SqlRSVPWriteModel()
    await write_model.create_rsvp(event_id, "a@example.com", "10.0.0.1")

    with pytest.raises(DuplicateError) as exc_info:
        await write_model.create_rsvp(event_id, "a@example.com", "10.0.0.9")

    assert str(exc_info.value) == "This email has already RSVP'd for this event"
    assert await SqlRSVPReadModel().count_for_event(event_id) == 1


@pytest.mark.asyncio
async def test_create_rsvp_same_email_different_events(db_engine):
    first_event = await add_event()
    second_event = await add_event()
    write_model = SqlRSVPWriteModel()

    await write_model.create_rsvp(first_event, "a@example.com", "10.0.0.1")
    count = await write_model.create_rsvp(second_event, "a@example.com", "10.0.0.1")

    assert count == 1


@pytest.mark.asyncio
async def test_create_rsvp_duplicate_caught_by_unique_index(db_engine):
    """Test the store rejects a duplicate the lookup missed."""
    event_id = await add_event()
    write_model = RacingRSVPWriteModel()
    await write_model.create_rsvp(event_id, "a@example.com", "10.0.0.1")

    with pytest.raises(DuplicateError):
        await write_model.create_rsvp(event_id, "a@example.com", "10.0.0.1")

    assert await SqlRSVPReadModel().count_for_event(event_id) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("email", [None, "", "   "])
async def test_create_rsvp_requires_email(db_engine, email):
    event_id = await add_event()
    write_model = SqlRSVPWriteModel()

    with pytest.raises(ValidationError) as exc_info:
        await write_model.create_rsvp(event_id, email, "10.0.0.1")

    assert exc_info.value.message == "Email is required for RSVP"
    assert await SqlRSVPReadModel().count_for_event(event_id) == 0


@pytest.mark.asyncio
async def test_create_rsvp_emails_attendee_and_creator(db_engine):
    """Test the attendee gets the event details and the creator gets the new total."""
    event_id = await add_event(title="Park RPD", video_recorded=True, format="memory")
    sender = InMemoryNotificationSender()
    write_model = SqlRSVPWriteModel(notification_sender=sender)

    await write_model.create_rsvp(event_id, "fan@example.com", "10.0.0.1")

    [confirmation] = sender.sent_to("fan@example.com")
    assert confirmation["subject"] == "RSVP Confirmation: Park RPD"
    assert "Dancing from memory" in confirmation["body"]
    assert "Will be recorded & posted" in confirmation["body"]

    [alert] = sender.sent_to("host@example.com")
    assert alert["subject"] == "New RSVP for your event: Park RPD"
    assert "fan@example.com" in alert["body"]
    assert "Total RSVPs: 1" in alert["body"]


@pytest.mark.asyncio
async def test_create_rsvp_kept_when_emails_fail(db_engine):
    event_id = await add_event()
    sender = InMemoryNotificationSender(fail_with="relay down")
    write_model = SqlRSVPWriteModel(notification_sender=sender)

    count = await write_model.create_rsvp(event_id, "fan@example.com", "10.0.0.1")

    assert count == 1
    assert len(sender.sent) == 2


@pytest.mark.asyncio
async def test_create_rsvp_unknown_event_sends_nothing(db_engine):
    """Test an RSVP for a missing event is stored without any emails."""
    sender = InMemoryNotificationSender()
    write_model = SqlRSVPWriteModel(notification_sender=sender)

    count = await write_model.create_rsvp(404, "fan@example.com", "10.0.0.1")

    assert count == 1
    assert sender.sent == []


@pytest.mark.asyncio
async def test_create_rsvp_store_failure_logged_once(db_engine, caplog):
    """Test a store failure is raised as StoreError without logging it here."""
    event_id = await add_event()

    class FailingRSVPWriteModel(SqlRSVPWriteModel):
        async def _rsvp_exists(self, session, event_id: int, email: str) -> bool:
            raise OperationalError("SELECT", {}, Exception("database is locked"))

    with caplog.at_level(logging.ERROR):
        with pytest.raises(StoreError):
            await FailingRSVPWriteModel().create_rsvp(event_id, "a@example.com", "10.0.0.1")

    assert [record for record in caplog.records if record.levelno >= logging.ERROR] == []
