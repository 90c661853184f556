"""smtplib stand-ins that record sessions instead of talking to a relay."""


def make_fake_smtp(starttls: bool = True, login_error: Exception | None = None):
    """Build an smtplib.SMTP stand-in that records every session."""

    class FakeSMTP:
        sessions: list["FakeSMTP"] = []

        def __init__(self, host, port, timeout=None, context=None):
            self.host = host
            self.port = port
            self.timeout = timeout
            self.context = context
            self.commands: list[str] = []
            self.messages = []
            self.credentials = None
            FakeSMTP.sessions.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            self.commands.append("QUIT")
            return False

        def ehlo(self):
            self.commands.append("EHLO")

        def has_extn(self, name):
            return starttls and name.lower() == "starttls"

        def starttls(self, context=None):
            self.commands.append("STARTTLS")

        def login(self, user, password):
            self.commands.append("AUTH")
            if login_error:
                raise login_error
            self.credentials = (user, password)

        def send_message(self, msg):
            self.commands.append("DATA")
            # smtplib flattens the message before DATA
            msg.as_bytes()
            self.messages.append(msg)

    return FakeSMTP
