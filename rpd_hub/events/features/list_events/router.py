from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rpd_hub.events.dtos import EventFilters
from rpd_hub.events.repository.read_models import EventReadModel, SqlEventReadModel
from rpd_hub.events.urls import EVENTS_URL

router = APIRouter()


class EventResponse(BaseModel):
    """Event as shown on the listing, with its live RSVP count."""

    id: int
    title: str
    description: str | None = None
    playlist: str | None = None
    format: str | None = None
    location: str
    date: str
    time: str
    video_recorded: bool
    proficiency: str | None = None
    artist_type: str | None = None
    creator_email: str
    created_at: datetime
    rsvp_count: int


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


@router.get(EVENTS_URL, response_model=list[EventResponse])
async def list_events(
    q: str | None = None,
    location: str | None = None,
    proficiency: str | None = None,
    artist_type: str | None = None,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[EventResponse]:
    """
    List events ordered by date then time.

    Filters are optional and combined with AND:
    - q: text searched in title, description and playlist
    - location: part of the location
    - proficiency / artist_type: exact value
    """
    filters = EventFilters(
        q=q or None,
        location=location or None,
        proficiency=proficiency or None,
        artist_type=artist_type or None,
    )
    events = await read_model.list_events(filters)
    return [EventResponse(**asdict(event)) for event in events]
