from functools import lru_cache

from rpd_hub.config.settings import settings
from rpd_hub.email_service.base import NotificationError, NotificationSenderBase, SendResult
from rpd_hub.email_service.smtp_service import SMTPNotificationSender
from rpd_hub.email_service.templates import EmailTemplates


@lru_cache
def get_notification_sender() -> NotificationSenderBase:
    """Process-wide sender, built once from settings. Override in tests."""
    return SMTPNotificationSender(config=settings)


__all__ = [
    "EmailTemplates",
    "NotificationError",
    "NotificationSenderBase",
    "SendResult",
    "SMTPNotificationSender",
    "get_notification_sender",
]
