"""Write model for the create event feature.

Stores the event first, then tells the creator it is live. The confirmation
email is best-effort: once the row is committed the id is returned whatever the
mail relay does.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rpd_hub.config.database import async_session_manager
from rpd_hub.email_service.base import NotificationSenderBase
from rpd_hub.events.dtos import EventDTO, NewEventDTO, StoreError, ValidationError
from rpd_hub.events.repository.orm_models import Event

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("title", "location", "date", "time")
REQUIRED_CHOICE_FIELDS = ("format", "proficiency", "artist_type")


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class EventWriteModel(ABC):
    """Abstract base class for event write operations."""

    @abstractmethod
    async def create_event(self, new_event: NewEventDTO) -> int:
        """Persist a new event and return its generated id.

        Raises:
            ValidationError: a required field is missing or blank
            StoreError: the event could not be stored
        """
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    """SQL implementation of event write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        notification_sender: NotificationSenderBase | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.notification_sender = notification_sender

    def validate(self, new_event: NewEventDTO) -> None:
        if _is_blank(new_event.creator_email):
            raise ValidationError("creator_email", "Creator email is required")
        for field_name in REQUIRED_TEXT_FIELDS:
            if _is_blank(getattr(new_event, field_name)):
                raise ValidationError(field_name, f"{field_name.capitalize()} is required")
        for field_name in REQUIRED_CHOICE_FIELDS:
            if _is_blank(getattr(new_event, field_name)):
                raise ValidationError(field_name, f"{field_name} is required")

    async def create_event(self, new_event: NewEventDTO) -> int:
        self.validate(new_event)

        event = Event(
            title=new_event.title,
            description=new_event.description,
            playlist=new_event.playlist,
            format=new_event.format,
            location=new_event.location,
            date=new_event.date,
            time=new_event.time,
            video_recorded=bool(new_event.video_recorded),
            proficiency=new_event.proficiency,
            artist_type=new_event.artist_type,
            creator_email=new_event.creator_email,
        )

        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                session.add(event)
                await session.flush()
                await session.refresh(event)
                created = EventDTO.from_event(event)
        except SQLAlchemyError as e:
            raise StoreError("Failed to store event") from e

        logger.info(f"Created event {created.id} for {created.creator_email}")

        if self.notification_sender:
            result = await self.notification_sender.send_event_created(created)
            if not result.success:
                logger.warning(
                    f"Event {created.id} created but confirmation email failed: {result.error}"
                )

        return created.id
