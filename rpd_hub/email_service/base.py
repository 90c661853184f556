from abc import ABC, abstractmethod
from dataclasses import dataclass

from rpd_hub.email_service.templates import EmailTemplates
from rpd_hub.events.dtos import EventDTO


@dataclass(frozen=True)
class SendResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class NotificationError(Exception):
    """Delivery failure reported by the mail relay or the network."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        command: str | None = None,
        response: str | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.command = command
        self.response = response
        super().__init__(message)


class NotificationSenderBase(ABC):
    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> SendResult:
        """Deliver a plain-text email.

        Implementations never raise: every failure is reported through the
        returned SendResult.
        """
        raise NotImplementedError

    async def send_event_created(self, event: EventDTO) -> SendResult:
        return await self.send(
            to=event.creator_email,
            subject=EmailTemplates.EVENT_CREATED_SUBJECT.format(title=event.title),
            body=EmailTemplates.EVENT_CREATED_TEXT.format(
                title=event.title,
                date=event.date,
                time=event.time,
                location=event.location,
            ),
        )

    async def send_rsvp_confirmation(self, event: EventDTO, email: str) -> SendResult:
        return await self.send(
            to=email,
            subject=EmailTemplates.RSVP_CONFIRMATION_SUBJECT.format(title=event.title),
            body=EmailTemplates.RSVP_CONFIRMATION_TEXT.format(
                title=event.title,
                date=event.date,
                time=event.time,
                location=event.location,
                format_label=EmailTemplates.format_label(event.format),
                video_label=EmailTemplates.video_label(event.video_recorded),
                description=event.description or "",
                playlist=event.playlist or "",
            ),
        )

    async def send_new_rsvp_alert(
        self, event: EventDTO, attendee_email: str, rsvp_count: int
    ) -> SendResult:
        return await self.send(
            to=event.creator_email,
            subject=EmailTemplates.NEW_RSVP_SUBJECT.format(title=event.title),
            body=EmailTemplates.NEW_RSVP_TEXT.format(
                title=event.title,
                attendee_email=attendee_email,
                rsvp_count=rsvp_count,
            ),
        )

    async def send_test_email(self, to: str) -> SendResult:
        return await self.send(
            to=to,
            subject=EmailTemplates.TEST_SUBJECT,
            body=EmailTemplates.TEST_TEXT,
        )
