# contact_relay/lib/contact_message.py
import html
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

PLACEHOLDER = "-"


class Submission(BaseModel):
    """Contact form body. Presence and shape are checked by the relay, not here."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    subject: Optional[str] = None


@dataclass(frozen=True)
class OutboundMessage:
    sender: str
    to: str
    reply_to: str
    subject: str
    text: str
    html: str


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _one_line(value: str) -> str:
    return " ".join(value.split())


def build_subject(name: str, subject: Optional[str] = None) -> str:
    # header values cannot carry line breaks
    name = _one_line(name)
    subject = _one_line(_clean(subject))
    if subject:
        return f"({subject}) New message from {name}"
    return f"New message from {name}"


def build_text(name: str, email: str, phone: Optional[str], subject: Optional[str], message: str) -> str:
    return (
        f"Name: {name}\n"
        f"Email: {email}\n"
        f"Phone: {_clean(phone) or PLACEHOLDER}\n"
        f"Subject: {_clean(subject) or PLACEHOLDER}\n"
        f"Message:\n"
        f"{message}"
    )


def _esc(value: str) -> str:
    return html.escape(value, quote=True)


def build_html(name: str, email: str, phone: Optional[str], subject: Optional[str], message: str) -> str:
    return (
        "<h2>New contact form submission</h2>\n"
        f"<p><b>Name:</b> {_esc(name)}</p>\n"
        f"<p><b>Email:</b> {_esc(email)}</p>\n"
        f"<p><b>Phone:</b> {_esc(_clean(phone) or PLACEHOLDER)}</p>\n"
        f"<p><b>Subject:</b> {_esc(_clean(subject) or PLACEHOLDER)}</p>\n"
        "<p><b>Message:</b></p>\n"
        f'<pre style="white-space:pre-wrap;font-family:inherit">{_esc(message)}</pre>\n'
    )


def build_message(submission: Submission, sender: str, to: str) -> OutboundMessage:
    """Derive the outgoing email. Assumes the submission was already validated."""
    name = _clean(submission.name)
    email = _clean(submission.email)
    message = _clean(submission.message)
    return OutboundMessage(
        sender=sender,
        to=to,
        reply_to=email,
        subject=build_subject(name, submission.subject),
        text=build_text(name, email, submission.phone, submission.subject, message),
        html=build_html(name, email, submission.phone, submission.subject, message),
    )
