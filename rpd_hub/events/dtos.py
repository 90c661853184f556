from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rpd_hub.events.repository.orm_models import Event


class ValidationError(Exception):
    """Raised when a required field is missing or blank."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class DuplicateError(Exception):
    """Raised when an email has already RSVP'd for an event."""

    def __init__(self, event_id: int, email: str) -> None:
        self.event_id = event_id
        self.email = email
        super().__init__("This email has already RSVP'd for this event")


class StoreError(Exception):
    """Raised when the persistent store fails unexpectedly."""


class EventFormat(str, Enum):
    MEMORY = "memory"
    VIDEO = "video"


class Proficiency(str, Enum):
    BEGINNER = "beginner"
    MID = "mid"
    PRO = "pro"


class ArtistType(str, Enum):
    GIRL_GROUP = "girl_group"
    BOY_GROUP = "boy_group"
    MIXED = "mixed"


@dataclass(frozen=True)
class EventFilters:
    """Optional list filters; unset or blank values are ignored."""

    q: str | None = None
    location: str | None = None
    proficiency: str | None = None
    artist_type: str | None = None


@dataclass(frozen=True)
class NewEventDTO:
    title: str | None
    location: str | None
    date: str | None
    time: str | None
    creator_email: str | None
    format: str | None = None
    proficiency: str | None = None
    artist_type: str | None = None
    description: str | None = None
    playlist: str | None = None
    video_recorded: bool = False


@dataclass(frozen=True)
class EventDTO:
    id: int
    title: str
    location: str
    date: str
    time: str
    format: str | None
    proficiency: str | None
    artist_type: str | None
    description: str | None
    playlist: str | None
    video_recorded: bool
    creator_email: str
    created_at: datetime
    rsvp_count: int = 0

    @classmethod
    def from_event(cls, event: "Event", rsvp_count: int = 0) -> "EventDTO":
        return cls(
            id=event.id,
            title=event.title,
            location=event.location,
            date=event.date,
            time=event.time,
            format=event.format,
            proficiency=event.proficiency,
            artist_type=event.artist_type,
            description=event.description,
            playlist=event.playlist,
            video_recorded=bool(event.video_recorded),
            creator_email=event.creator_email,
            created_at=event.created_at,
            rsvp_count=rsvp_count or 0,
        )


@dataclass(frozen=True)
class RSVPEntryDTO:
    email: str
    created_at: datetime
