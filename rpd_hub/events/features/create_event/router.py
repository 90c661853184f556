from fastapi import APIRouter, Depends

from rpd_hub.email_service import NotificationSenderBase, get_notification_sender
from rpd_hub.events.dtos import NewEventDTO, ValidationError
from rpd_hub.events.features.create_event.dtos import CreateEventRequest, CreateEventResponse
from rpd_hub.events.features.create_event.write_model import (
    EventWriteModel,
    SqlEventWriteModel,
)
from rpd_hub.events.urls import EVENTS_URL

router = APIRouter()


def get_event_write_model(
    notification_sender: NotificationSenderBase = Depends(get_notification_sender),
) -> EventWriteModel:
    """Dependency to get event write model instance."""
    return SqlEventWriteModel(notification_sender=notification_sender)


@router.post(EVENTS_URL, response_model=CreateEventResponse)
async def create_event(
    request: CreateEventRequest,
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> CreateEventResponse:
    """
    Post a new event.

    The creator receives a confirmation email; if that email cannot be sent
    the event is still created.
    """
    if not request.creator_email:
        raise ValidationError("creator_email", "Creator email is required")

    event_id = await write_model.create_event(
        NewEventDTO(
            title=request.title,
            description=request.description,
            playlist=request.playlist,
            format=request.format.value if request.format else None,
            location=request.location,
            date=request.date,
            time=request.time,
            video_recorded=request.video_recorded,
            proficiency=request.proficiency.value if request.proficiency else None,
            artist_type=request.artist_type.value if request.artist_type else None,
            creator_email=request.creator_email,
        )
    )
    return CreateEventResponse(id=event_id)
