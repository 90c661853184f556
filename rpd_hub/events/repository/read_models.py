import abc

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError

from rpd_hub.config.database import async_session_manager
from rpd_hub.events.dtos import EventDTO, EventFilters, RSVPEntryDTO, StoreError
from rpd_hub.events.repository.orm_models import RSVP, Event


def rsvp_count_subquery():
    return (
        select(func.count(RSVP.id))
        .where(RSVP.event_id == Event.id)
        .correlate(Event)
        .scalar_subquery()
    )


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_events(self, filters: EventFilters) -> list[EventDTO]:
        """
        List events matching every supplied filter, soonest first.
        Each event carries its current RSVP count.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_event(self, event_id: int) -> EventDTO | None:
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of the event read model."""

    async def list_events(self, filters: EventFilters) -> list[EventDTO]:
        rsvp_count = rsvp_count_subquery().label("rsvp_count")
        stmt = select(Event, rsvp_count)

        if filters.q:
            stmt = stmt.where(
                or_(
                    Event.title.icontains(filters.q, autoescape=True),
                    Event.description.icontains(filters.q, autoescape=True),
                    Event.playlist.icontains(filters.q, autoescape=True),
                )
            )
        if filters.location:
            stmt = stmt.where(Event.location.icontains(filters.location, autoescape=True))
        if filters.proficiency:
            stmt = stmt.where(Event.proficiency == filters.proficiency)
        if filters.artist_type:
            stmt = stmt.where(Event.artist_type == filters.artist_type)

        # Lexical ordering; relies on ISO dates and zero-padded 24h times
        stmt = stmt.order_by(Event.date.asc(), Event.time.asc(), Event.id.asc())

        try:
            async with async_session_manager() as session:
                result = await session.execute(stmt)
                return [EventDTO.from_event(event, count) for event, count in result.all()]
        except SQLAlchemyError as e:
            raise StoreError("Failed to list events") from e

    async def get_event(self, event_id: int) -> EventDTO | None:
        stmt = select(Event, rsvp_count_subquery().label("rsvp_count")).where(
            Event.id == event_id
        )
        try:
            async with async_session_manager() as session:
                row = (await session.execute(stmt)).first()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load event {event_id}") from e

        if row is None:
            return None
        event, count = row
        return EventDTO.from_event(event, count)


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_for_event(self, event_id: int) -> list[RSVPEntryDTO]:
        """List who RSVP'd for an event, earliest first."""
        raise NotImplementedError

    @abc.abstractmethod
    async def count_for_event(self, event_id: int) -> int:
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of the RSVP read model."""

    async def list_for_event(self, event_id: int) -> list[RSVPEntryDTO]:
        stmt = (
            select(RSVP.email, RSVP.created_at)
            .where(RSVP.event_id == event_id)
            .order_by(RSVP.created_at.asc(), RSVP.id.asc())
        )
        try:
            async with async_session_manager() as session:
                result = await session.execute(stmt)
                return [
                    RSVPEntryDTO(email=email, created_at=created_at)
                    for email, created_at in result.all()
                ]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list RSVPs for event {event_id}") from e

    async def count_for_event(self, event_id: int) -> int:
        stmt = select(func.count(RSVP.id)).where(RSVP.event_id == event_id)
        try:
            async with async_session_manager() as session:
                return (await session.execute(stmt)).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count RSVPs for event {event_id}") from e
