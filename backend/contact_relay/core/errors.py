# contact_relay/core/errors.py


class RelayError(Exception):
    """Base class for errors reported back to the caller as {"ok": false}."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """Missing or malformed submission fields. Never a server fault."""

    status_code = 400


class DeliveryError(RelayError):
    """The SMTP relay refused or failed the send, or is not configured."""

    status_code = 500
