# backend/contact_relay/dependencies.py
from fastapi import Depends, Request

from contact_relay.core.mailer import MessageSender, SmtpSender
from contact_relay.core.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sender(settings: Settings = Depends(get_settings)) -> MessageSender:
    # one sender (and SMTP connection) per request
    return SmtpSender(settings)
