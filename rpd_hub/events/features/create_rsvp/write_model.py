"""Write model for the RSVP feature."""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rpd_hub.config.database import async_session_manager
from rpd_hub.email_service.base import NotificationSenderBase
from rpd_hub.events.dtos import DuplicateError, EventDTO, StoreError, ValidationError
from rpd_hub.events.repository.orm_models import RSVP, Event

logger = logging.getLogger(__name__)


class RSVPWriteModel(ABC):
    """Abstract base class for RSVP write operations."""

    @abstractmethod
    async def create_rsvp(self, event_id: int, email: str | None, user_identifier: str) -> int:
        """Record an RSVP and return the event's new RSVP count.

        Raises:
            ValidationError: the email is missing or blank
            DuplicateError: this email already RSVP'd for the event
            StoreError: the RSVP could not be stored
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """SQL implementation of RSVP write operations.

    Uniqueness of (event_id, email) is checked before inserting and enforced by
    a unique index, so two concurrent requests cannot both succeed.
    """

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        notification_sender: NotificationSenderBase | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.notification_sender = notification_sender

    async def create_rsvp(self, event_id: int, email: str | None, user_identifier: str) -> int:
        if email is None or not email.strip():
            raise ValidationError("email", "Email is required for RSVP")

        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                if await self._rsvp_exists(session, event_id, email):
                    logger.info(f"Duplicate RSVP rejected for event {event_id}: {email}")
                    raise DuplicateError(event_id=event_id, email=email)

                session.add(
                    RSVP(
                        event_id=event_id,
                        user_identifier=user_identifier or "anonymous",
                        email=email,
                    )
                )
                await session.flush()
        except IntegrityError as e:
            logger.info(f"Concurrent duplicate RSVP rejected for event {event_id}: {email}")
            raise DuplicateError(event_id=event_id, email=email) from e
        except SQLAlchemyError as e:
            raise StoreError("Failed to store RSVP") from e

        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                event = await session.get(Event, event_id)
                event_dto = EventDTO.from_event(event) if event else None
                rsvp_count = await self._count(session, event_id)
        except SQLAlchemyError as e:
            raise StoreError("Failed to load event") from e

        if event_dto is None:
            logger.warning(f"RSVP stored for unknown event {event_id}; no emails sent")
            return rsvp_count

        await self._notify(event_dto, email, rsvp_count)

        # Other RSVPs may have landed while the emails were going out
        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                return await self._count(session, event_id)
        except SQLAlchemyError as e:
            raise StoreError("Failed to count RSVPs") from e

    async def _rsvp_exists(self, session, event_id: int, email: str) -> bool:
        stmt = select(RSVP.id).where(RSVP.event_id == event_id, RSVP.email == email).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def _count(self, session, event_id: int) -> int:
        stmt = select(func.count(RSVP.id)).where(RSVP.event_id == event_id)
        return (await session.execute(stmt)).scalar_one()

    async def _notify(self, event: EventDTO, email: str, rsvp_count: int) -> None:
        if not self.notification_sender:
            return

        attendee = await self.notification_sender.send_rsvp_confirmation(event, email)
        if not attendee.success:
            logger.warning(f"RSVP confirmation to {email} failed: {attendee.error}")

        creator = await self.notification_sender.send_new_rsvp_alert(event, email, rsvp_count)
        if not creator.success:
            logger.warning(
                f"New RSVP alert to {event.creator_email} for event {event.id} failed: "
                f"{creator.error}"
            )
