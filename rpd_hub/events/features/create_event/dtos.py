"""DTOs for create event feature."""

from pydantic import BaseModel

from rpd_hub.events.dtos import ArtistType, EventFormat, Proficiency


class CreateEventRequest(BaseModel):
    """Request body for posting an event.

    Every field is optional at the schema level so a missing value is reported
    as a 400 with a readable message rather than a schema error.
    """

    title: str | None = None
    description: str | None = None
    playlist: str | None = None
    format: EventFormat | None = None
    location: str | None = None
    date: str | None = None
    time: str | None = None
    video_recorded: bool = False
    proficiency: Proficiency | None = None
    artist_type: ArtistType | None = None
    creator_email: str | None = None


class CreateEventResponse(BaseModel):
    id: int
