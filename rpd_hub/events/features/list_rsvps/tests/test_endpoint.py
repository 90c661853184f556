import pytest

from rpd_hub.events.repository.tests.factories import add_event, add_rsvp
from rpd_hub.events.urls import EVENT_RSVPS_URL


@pytest.mark.asyncio
async def test_list_rsvps(client):
    """Test the management view gets every RSVP email for the event."""
    event_id = await add_event()
    await add_rsvp(event_id, "first@example.com")
    await add_rsvp(event_id, "second@example.com")

    response = await client.get(EVENT_RSVPS_URL.format(event_id=event_id))

    assert response.status_code == 200
    data = response.json()
    assert [entry["email"] for entry in data] == ["first@example.com", "second@example.com"]
    assert all(entry["created_at"] for entry in data)


@pytest.mark.asyncio
async def test_list_rsvps_no_rsvps(client):
    event_id = await add_event()

    response = await client.get(EVENT_RSVPS_URL.format(event_id=event_id))

    assert response.status_code == 200
    assert response.json() == []
