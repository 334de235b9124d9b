"""twilio_client - async client for Twilio SMS and Verify."""

from twilio_client._version import __version__
from twilio_client.config import TwilioConfig, TwilioSettings
from twilio_client.credentials import Credentials
from twilio_client.errors import (
    AuthenticationError,
    ClientError,
    ConfigError,
    InputValidationError,
    InvalidForRegionError,
    InvalidRecipientError,
    MalformedPhoneNumberError,
    MalformedResponseError,
    MessageBodyError,
    ProviderError,
    TransportError,
    TransportTimeoutError,
    TwilioClientError,
    UnexpectedStatusError,
)
from twilio_client.models import (
    DeliveryStatus,
    MessageResource,
    MessageStatus,
    OutboundMessage,
    Verification,
    VerificationChannel,
    VerificationCheck,
    VerificationCheckResult,
    VerificationRequest,
    VerificationStatus,
)
from twilio_client.phone import PhoneNumber, is_valid_phone, normalize_phone
from twilio_client.signature import (
    SIGNATURE_HEADER,
    SignatureVerifier,
    WebhookSignature,
    compute_signature,
    verify_signature,
)
from twilio_client.sms import TwilioSMSClient
from twilio_client.verify import TwilioVerifyClient
from twilio_client.webhook import parse_status_callback

__all__ = [
    "__version__",
    # Config
    "Credentials",
    "TwilioConfig",
    "TwilioSettings",
    # Clients
    "TwilioSMSClient",
    "TwilioVerifyClient",
    # Phone numbers
    "PhoneNumber",
    "is_valid_phone",
    "normalize_phone",
    # Webhooks
    "SIGNATURE_HEADER",
    "SignatureVerifier",
    "WebhookSignature",
    "compute_signature",
    "parse_status_callback",
    "verify_signature",
    # Models
    "DeliveryStatus",
    "MessageResource",
    "MessageStatus",
    "OutboundMessage",
    "Verification",
    "VerificationChannel",
    "VerificationCheck",
    "VerificationCheckResult",
    "VerificationRequest",
    "VerificationStatus",
    # Errors
    "AuthenticationError",
    "ClientError",
    "ConfigError",
    "InputValidationError",
    "InvalidForRegionError",
    "InvalidRecipientError",
    "MalformedPhoneNumberError",
    "MalformedResponseError",
    "MessageBodyError",
    "ProviderError",
    "TransportError",
    "TransportTimeoutError",
    "TwilioClientError",
    "UnexpectedStatusError",
]
