from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from rpd_hub.email_service import NotificationSenderBase, get_notification_sender
from rpd_hub.events.dtos import ValidationError
from rpd_hub.events.features.create_rsvp.write_model import RSVPWriteModel, SqlRSVPWriteModel
from rpd_hub.events.urls import EVENT_RSVP_URL

router = APIRouter()


class CreateRSVPRequest(BaseModel):
    email: str | None = None


class CreateRSVPResponse(BaseModel):
    rsvp_count: int


def get_rsvp_write_model(
    notification_sender: NotificationSenderBase = Depends(get_notification_sender),
) -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel(notification_sender=notification_sender)


@router.post(EVENT_RSVP_URL, response_model=CreateRSVPResponse)
async def create_rsvp(
    event_id: int,
    rsvp_data: CreateRSVPRequest,
    request: Request,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> CreateRSVPResponse:
    """
    RSVP for an event by email.
    Each email can RSVP once per event; the attendee and the creator are emailed.
    """
    if not rsvp_data.email:
        raise ValidationError("email", "Email is required for RSVP")

    user_identifier = request.client.host if request.client else "anonymous"
    rsvp_count = await write_model.create_rsvp(
        event_id=event_id,
        email=rsvp_data.email,
        user_identifier=user_identifier,
    )
    return CreateRSVPResponse(rsvp_count=rsvp_count)
