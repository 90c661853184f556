import asyncio
import logging
import smtplib
import ssl
from email.errors import MessageError
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid, parseaddr
from typing import Protocol

from rpd_hub.email_service.base import NotificationError, NotificationSenderBase, SendResult

logger = logging.getLogger(__name__)

SMTPS_PORT = 465


def _single_line(value: str) -> str:
    return " ".join(value.splitlines())


class SMTPConfig(Protocol):
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_pass: str
    smtp_tls_reject_unauthorized: bool
    smtp_timeout: float
    smtp_max_connections: int

    @property
    def smtp_configured(self) -> bool: ...

    @property
    def sender_address(self) -> str: ...


class SMTPNotificationSender(NotificationSenderBase):
    """Sends plain-text mail through the configured SMTP relay.

    Delivery is blocking smtplib work, so it runs in a worker thread; at most
    ``smtp_max_connections`` relay sessions are open at the same time.
    """

    def __init__(
        self,
        config: SMTPConfig,
        smtp_class: type[smtplib.SMTP] = smtplib.SMTP,
        smtp_ssl_class: type[smtplib.SMTP_SSL] = smtplib.SMTP_SSL,
    ):
        self._config = config
        self._smtp_class = smtp_class
        self._smtp_ssl_class = smtp_ssl_class
        self._connections = asyncio.Semaphore(max(1, config.smtp_max_connections))

    @property
    def from_address(self) -> str:
        return self._config.sender_address

    def _build(self, to_address: str, subject: str, body: str) -> MIMEText:
        msg = MIMEText(body, "plain", "utf-8")
        # Titles come from users; a line break would start a new header
        msg["Subject"] = _single_line(subject)
        msg["From"] = self.from_address
        msg["To"] = to_address
        msg["Date"] = formatdate(localtime=True)

        domain = parseaddr(self.from_address)[1].rpartition("@")[2] or None
        msg["Message-ID"] = make_msgid(domain=domain)

        return msg

    def _create_message(self, to_address: str, subject: str, body: str) -> MIMEText:
        try:
            return self._build(to_address, subject, body)
        except (MessageError, ValueError) as e:
            raise NotificationError(f"Invalid message: {e}", command="DATA") from e

    def _ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self._config.smtp_tls_reject_unauthorized:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _connect(self, context: ssl.SSLContext) -> smtplib.SMTP:
        host = self._config.smtp_host
        port = self._config.smtp_port
        timeout = self._config.smtp_timeout
        if port == SMTPS_PORT:
            return self._smtp_ssl_class(host, port, timeout=timeout, context=context)
        return self._smtp_class(host, port, timeout=timeout)

    def _send(self, msg: MIMEText) -> None:
        context = self._ssl_context()
        command = "CONN"
        try:
            with self._connect(context) as server:
                if self._config.smtp_port != SMTPS_PORT:
                    command = "EHLO"
                    server.ehlo()
                    if server.has_extn("starttls"):
                        command = "STARTTLS"
                        server.starttls(context=context)
                        server.ehlo()
                command = "AUTH"
                server.login(self._config.smtp_user, self._config.smtp_pass)
                command = "DATA"
                server.send_message(msg)
        except (MessageError, ValueError) as e:
            raise NotificationError(f"Invalid message: {e}", command=command) from e
        except smtplib.SMTPResponseException as e:
            response = e.smtp_error
            if isinstance(response, bytes):
                response = response.decode("utf-8", errors="replace")
            raise NotificationError(
                f"{e.smtp_code} {response}",
                code=e.smtp_code,
                command=command,
                response=response,
            ) from e
        except smtplib.SMTPRecipientsRefused as e:
            raise NotificationError(
                f"Recipient refused: {', '.join(e.recipients)}",
                command="RCPT TO",
                response=str(e.recipients),
            ) from e
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(str(e) or type(e).__name__, command=command) from e

    async def send(self, to: str, subject: str, body: str) -> SendResult:
        if not self._config.smtp_configured:
            logger.info(f"SMTP not configured. Email would have been sent to: {to}")
            logger.info(f"Subject: {subject}")
            logger.debug(f"Content: {body}")
            return SendResult(success=False, error="SMTP not configured")

        if not to or not to.strip():
            return SendResult(success=False, error="Recipient address is required")
        if "\r" in to or "\n" in to:
            logger.warning(f"Refusing to send to a recipient containing a line break: {to!r}")
            return SendResult(success=False, error="Invalid recipient address")

        try:
            msg = self._create_message(to_address=to, subject=subject, body=body)
            async with self._connections:
                await asyncio.to_thread(self._send, msg)
        except NotificationError as e:
            logger.error(
                f"Failed to send email to {to}: {e.message} "
                f"(code={e.code}, command={e.command}, response={e.response})"
            )
            return SendResult(success=False, error=e.message)

        logger.info(f"Email sent successfully: {msg['Message-ID']}")
        return SendResult(success=True, message_id=msg["Message-ID"])
