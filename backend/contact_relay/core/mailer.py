# contact_relay/core/mailer.py
import logging
from abc import ABC, abstractmethod
import smtplib
import ssl
from contextlib import contextmanager
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Iterator, List

from contact_relay.core.errors import DeliveryError
from contact_relay.core.settings import Settings
from contact_relay.lib.contact_message import OutboundMessage

log = logging.getLogger("uvicorn.error")


class MessageSender(ABC):
    """Something that can deliver an OutboundMessage and hand back its id."""

    @abstractmethod
    def verify(self) -> None:
        """Check the transport is reachable. Raises DeliveryError if not."""

    @abstractmethod
    def send(self, message: OutboundMessage) -> str:
        """Deliver once and return the message id. Raises DeliveryError on failure."""


def sender_address(settings: Settings) -> str:
    return formataddr((settings.mail_from_name, settings.smtp_user or ""))


def to_email_message(message: OutboundMessage, message_id: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = message.sender
    msg["To"] = message.to
    msg["Reply-To"] = message.reply_to
    msg["Subject"] = message.subject
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = message_id
    msg.set_content(message.text)
    msg.add_alternative(message.html, subtype="html")
    return msg


class SmtpSender(MessageSender):
    """Opens a fresh SMTP connection per call; nothing is pooled or shared."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _missing(self) -> List[str]:
        s = self.settings
        checks = {
            "SMTP_HOST": s.smtp_host,
            "SMTP_USER": s.smtp_user,
            "SMTP_PASS": s.smtp_pass,
            "CONTACT_TO": s.contact_to,
        }
        return [k for k, v in checks.items() if not v]

    def _tls_context(self) -> ssl.SSLContext:
        ctx = ssl.create_default_context()
        ctx.minimum_version = ssl.TLSVersion.TLSv1_2
        return ctx

    @contextmanager
    def _session(self) -> Iterator[smtplib.SMTP]:
        missing = self._missing()
        if missing:
            raise DeliveryError(f"SMTP is not configured (missing {', '.join(missing)})")

        s = self.settings
        try:
            if s.use_implicit_tls:
                client = smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, context=self._tls_context())
            else:
                client = smtplib.SMTP(s.smtp_host, s.smtp_port)
            with client:
                if not s.use_implicit_tls:
                    client.ehlo()
                    if client.has_extn("starttls"):
                        client.starttls(context=self._tls_context())
                        client.ehlo()
                client.login(s.smtp_user, s.smtp_pass)
                yield client
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(str(exc) or exc.__class__.__name__) from exc

    def verify(self) -> None:
        with self._session() as client:
            client.noop()
        log.info(f"[smtp] connection to {self.settings.smtp_host}:{self.settings.smtp_port} verified")

    def send(self, message: OutboundMessage) -> str:
        user = self.settings.smtp_user or ""
        domain = user.rsplit("@", 1)[1] if "@" in user else None
        message_id = make_msgid(domain=domain)
        msg = to_email_message(message, message_id)

        with self._session() as client:
            refused = client.send_message(msg)

        accepted = [addr for addr in [message.to] if addr not in (refused or {})]
        log.info(f"[smtp] sent {message_id} accepted={accepted}")
        return message_id
