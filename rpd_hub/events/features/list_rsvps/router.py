from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rpd_hub.events.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from rpd_hub.events.urls import EVENT_RSVPS_URL

router = APIRouter()


class RSVPEntryResponse(BaseModel):
    email: str
    created_at: datetime


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


@router.get(EVENT_RSVPS_URL, response_model=list[RSVPEntryResponse])
async def list_rsvps(
    event_id: int,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> list[RSVPEntryResponse]:
    """
    List the emails that RSVP'd for an event.
    Backs the creator's management view.
    """
    entries = await read_model.list_for_event(event_id)
    return [RSVPEntryResponse(email=entry.email, created_at=entry.created_at) for entry in entries]
