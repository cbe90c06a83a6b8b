# contact_relay/lib/relay.py
import logging
import re
from typing import Optional

from contact_relay.core.errors import DeliveryError, ValidationError
from contact_relay.core.mailer import MessageSender, sender_address
from contact_relay.core.settings import Settings
from contact_relay.lib.contact_message import OutboundMessage, Submission, build_message

log = logging.getLogger("uvicorn.error")

# address specials would split or rewrite the Reply-To header
EMAIL_RE = re.compile(r"^[^\s@,;:<>()\[\]\"\\]+@[^\s@,;:<>()\[\]\"\\]+\.[^\s@,;:<>()\[\]\"\\]+$")


def is_email(value: Optional[str]) -> bool:
    return bool(EMAIL_RE.match((value or "").strip()))


def validate_submission(submission: Submission) -> None:
    required = (submission.name, submission.email, submission.message)
    if any(not (v or "").strip() for v in required):
        raise ValidationError("missing required fields")
    if not is_email(submission.email):
        raise ValidationError("invalid email")


def prepare_message(submission: Submission, settings: Settings) -> OutboundMessage:
    validate_submission(submission)
    return build_message(
        submission,
        sender=sender_address(settings),
        to=settings.contact_to or "",
    )


def relay_submission(submission: Submission, settings: Settings, sender: MessageSender) -> str:
    """Validate a contact submission and forward it by email.

    Exactly one send attempt is made; there is no retry. Returns the message
    id assigned by the transport.

    Raises:
        ValidationError: required fields missing or email malformed. Nothing
            is sent.
        DeliveryError: the transport failed; carries the underlying message.
    """
    try:
        message = prepare_message(submission, settings)
    except ValidationError as exc:
        log.info(f"[relay] rejected submission: {exc.message}")
        raise

    if settings.smtp_verify:
        try:
            sender.verify()
        except DeliveryError as exc:
            # advisory only, the send below still runs
            log.warning(f"[relay] SMTP verify failed, sending anyway: {exc.message}")

    try:
        message_id = sender.send(message)
    except DeliveryError as exc:
        log.error(f"[relay] delivery failed: {exc.message}")
        raise

    log.info(f"[relay] delivered {message_id} to {message.to}")
    return message_id
