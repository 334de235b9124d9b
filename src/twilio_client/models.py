"""Message and verification models."""

from __future__ import annotations

from enum import StrEnum, unique
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from twilio_client.phone import PhoneNumber

MAX_BODY_LENGTH = 1600
MAX_MEDIA_URLS = 10


@unique
class MessageStatus(StrEnum):
    QUEUED = "queued"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"
    DELIVERED = "delivered"
    UNDELIVERED = "undelivered"
    RECEIVING = "receiving"
    RECEIVED = "received"
    ACCEPTED = "accepted"
    SCHEDULED = "scheduled"
    READ = "read"
    PARTIALLY_DELIVERED = "partially_delivered"
    CANCELED = "canceled"


@unique
class VerificationChannel(StrEnum):
    SMS = "sms"
    CALL = "call"
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    SNA = "sna"


@unique
class VerificationStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    EXPIRED = "expired"
    CANCELED = "canceled"
    MAX_ATTEMPTS_REACHED = "max_attempts_reached"
    DELETED = "deleted"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class OutboundMessage(BaseModel):
    """A validated message ready to be sent.

    ``from_`` is ``None`` when the message goes out through a messaging
    service instead of a fixed sender number.
    """

    model_config = ConfigDict(frozen=True)

    to: PhoneNumber
    body: str
    from_: PhoneNumber | None = None
    media_urls: tuple[str, ...] = ()


class VerificationRequest(BaseModel):
    """Start a verification. ``to`` is E.164, or an address for the email channel."""

    model_config = ConfigDict(frozen=True)

    to: str
    channel: VerificationChannel = VerificationChannel.SMS
    locale: str | None = None


class VerificationCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    to: str
    code: str = Field(repr=False)


# ---------------------------------------------------------------------------
# Provider resources
# ---------------------------------------------------------------------------


class _Resource(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MessageResource(_Resource):
    """Message as returned by the provider's Messages endpoint."""

    sid: str
    status: MessageStatus
    to: str | None = None
    from_: str | None = Field(default=None, alias="from")
    body: str | None = None
    account_sid: str | None = None
    messaging_service_sid: str | None = None
    num_segments: str | None = None
    num_media: str | None = None
    direction: str | None = None
    price: str | None = None
    price_unit: str | None = None
    error_code: int | None = None
    error_message: str | None = None
    date_created: str | None = None
    date_sent: str | None = None
    date_updated: str | None = None


class SendCodeAttempt(_Resource):
    attempt_sid: str | None = None
    channel: VerificationChannel | None = None
    time: str | None = None


class Verification(_Resource):
    """Verification as returned by the provider's Verifications endpoint."""

    sid: str
    status: VerificationStatus
    service_sid: str | None = None
    account_sid: str | None = None
    to: str | None = None
    channel: VerificationChannel | None = None
    valid: bool = False
    lookup: dict[str, Any] | None = None
    send_code_attempts: list[SendCodeAttempt] = Field(default_factory=list)
    date_created: str | None = None
    date_updated: str | None = None


class VerificationCheckResult(_Resource):
    """Outcome of a verification check.

    ``status`` is reported as-is; a wrong code typically leaves the
    verification ``pending``.
    """

    sid: str
    status: VerificationStatus
    service_sid: str | None = None
    account_sid: str | None = None
    to: str | None = None
    channel: VerificationChannel | None = None
    valid: bool = False
    date_created: str | None = None
    date_updated: str | None = None

    @property
    def approved(self) -> bool:
        return self.status is VerificationStatus.APPROVED


class ErrorEnvelope(_Resource):
    """Error body returned by the provider on 4xx/5xx responses."""

    code: int
    message: str
    more_info: str | None = None
    status: int | None = None


class DeliveryStatus(BaseModel):
    """Status update for an outbound message, from a status callback.

    Attributes:
        message_id: Provider message SID.
        status: Reported status (e.g. ``delivered``, ``undelivered``).
        recipient: Number the message was sent to.
        sender: Number the message was sent from.
        error_code: Provider error code when delivery failed.
        error_message: Human-readable error, when provided.
        account_sid: Account that owns the message.
        raw: Original callback parameters.
    """

    message_id: str
    status: MessageStatus
    recipient: str = ""
    sender: str = ""
    error_code: int | None = None
    error_message: str | None = None
    account_sid: str | None = None
    raw: dict[str, str] = Field(default_factory=dict)

    @property
    def is_final(self) -> bool:
        return self.status in _FINAL_STATUSES


_FINAL_STATUSES = frozenset(
    {
        MessageStatus.DELIVERED,
        MessageStatus.UNDELIVERED,
        MessageStatus.FAILED,
        MessageStatus.READ,
        MessageStatus.CANCELED,
        MessageStatus.RECEIVED,
    }
)
