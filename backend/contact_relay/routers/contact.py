# contact_relay/routers/contact.py
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from contact_relay.core.errors import RelayError
from contact_relay.core.mailer import MessageSender
from contact_relay.core.settings import Settings
from contact_relay.dependencies import get_sender, get_settings
from contact_relay.lib.contact_message import Submission
from contact_relay.lib.relay import relay_submission

router = APIRouter(prefix="/api", tags=["contact"])


# Sync on purpose: smtplib blocks, so FastAPI runs this in its threadpool.
@router.post("/contact")
def contact(
    payload: Optional[Submission] = None,
    settings: Settings = Depends(get_settings),
    sender: MessageSender = Depends(get_sender),
):
    try:
        message_id = relay_submission(payload or Submission(), settings, sender)
    except RelayError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": exc.message},
        )
    return {"ok": True, "messageId": message_id}
