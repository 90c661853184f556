from sqlalchemy import Boolean, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from rpd_hub.config.table_names import TableNames
from rpd_hub.models.base import Base, TimeStamp

PLACEHOLDER_EMAIL = "unknown@example.com"


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    playlist: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 'memory' or 'video'
    format: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    # Stored as text and sorted lexically: ISO dates and 24h times sort correctly
    date: Mapped[str] = mapped_column(Text, nullable=False)
    time: Mapped[str] = mapped_column(Text, nullable=False)
    video_recorded: Mapped[bool] = mapped_column(Boolean, default=False)
    # 'beginner', 'mid' or 'pro'
    proficiency: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 'girl_group', 'boy_group' or 'mixed'
    artist_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator_email: Mapped[str] = mapped_column(
        Text, nullable=False, server_default=PLACEHOLDER_EMAIL
    )

    def __repr__(self) -> str:
        return f"<Event {self.id} {self.title} on {self.date} {self.time}>"


class RSVP(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value
    __table_args__ = (
        Index("uq_rsvps_event_id_email", "event_id", "email", unique=True),
    )

    event_id: Mapped[int] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.id"),
        nullable=False,
    )
    # Informational only, never used for uniqueness
    user_identifier: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, server_default=PLACEHOLDER_EMAIL)

    def __repr__(self) -> str:
        return f"<RSVP {self.email} for event {self.event_id}>"
