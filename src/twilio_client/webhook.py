"""Parse inbound status callbacks."""

from __future__ import annotations

import contextlib
from collections.abc import Mapping

from twilio_client.errors import InputValidationError
from twilio_client.models import DeliveryStatus, MessageStatus


def parse_status_callback(payload: Mapping[str, str]) -> DeliveryStatus:
    """Convert a message status callback into a :class:`DeliveryStatus`.

    Verify the request signature first (see :func:`verify_signature`); this
    function trusts its input.

    Note: status callbacks are form-encoded. Convert to a dict first::

        payload = dict(await request.form())

    Raises:
        InputValidationError: The payload lacks ``MessageSid`` or carries an
            unknown ``MessageStatus``.
    """
    message_id = payload.get("MessageSid") or payload.get("SmsSid")
    if not message_id:
        raise InputValidationError("Status callback without MessageSid", field="MessageSid")

    raw_status = payload.get("MessageStatus") or payload.get("SmsStatus") or ""
    try:
        status = MessageStatus(raw_status)
    except ValueError:
        raise InputValidationError(
            f"Unknown message status: {raw_status!r}", field="MessageStatus"
        ) from None

    error_code = None
    if code := payload.get("ErrorCode"):
        with contextlib.suppress(ValueError):
            error_code = int(code)

    return DeliveryStatus(
        message_id=message_id,
        status=status,
        recipient=payload.get("To", ""),
        sender=payload.get("From", ""),
        error_code=error_code,
        error_message=payload.get("ErrorMessage"),
        account_sid=payload.get("AccountSid"),
        raw=dict(payload),
    )
