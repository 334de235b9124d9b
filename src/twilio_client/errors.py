"""Exception hierarchy for twilio_client."""

from __future__ import annotations


class TwilioClientError(Exception):
    """Base exception for all twilio_client errors."""


class ConfigError(TwilioClientError):
    """Raised when credentials or client configuration are missing or invalid."""


# ---------------------------------------------------------------------------
# Local validation (raised before any request is made)
# ---------------------------------------------------------------------------


class InputValidationError(TwilioClientError):
    """Raised when caller input is rejected before reaching the network.

    Attributes:
        field: Name of the offending request parameter (e.g. ``"To"``).
    """

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class MalformedPhoneNumberError(InputValidationError):
    """The input could not be parsed as a phone number at all."""


class InvalidForRegionError(InputValidationError):
    """The input parsed but matches no known numbering plan."""


class MessageBodyError(InputValidationError):
    """The message body is empty or exceeds the provider's length limit."""


class InvalidRecipientError(InputValidationError):
    """A non-phone recipient or a verification code is malformed."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportError(TwilioClientError):
    """Network-level failure. The underlying ``httpx`` error is the ``__cause__``."""


class TransportTimeoutError(TransportError):
    """The request did not complete within the configured timeout."""


# ---------------------------------------------------------------------------
# Response interpretation
# ---------------------------------------------------------------------------


class ClientError(TwilioClientError):
    """Base for failures interpreting a provider response."""


class MalformedResponseError(ClientError):
    """A success response whose body does not match the expected shape."""


class ProviderError(ClientError):
    """Error envelope returned by the provider.

    Attributes:
        code: Provider error code (e.g. ``21211`` for an invalid ``To`` number).
        message: Provider error message, verbatim.
        more_info: Documentation URL for the error code, if present.
        status_code: HTTP status of the response.
    """

    def __init__(
        self,
        code: int,
        message: str,
        *,
        more_info: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"Twilio error {code}: {message}")
        self.code = code
        self.message = message
        self.more_info = more_info
        self.status_code = status_code


class AuthenticationError(ProviderError):
    """The provider rejected the account credentials (HTTP 401)."""


class UnexpectedStatusError(ClientError):
    """Error status whose body is not a provider error envelope.

    Attributes:
        status_code: HTTP status of the response.
        body: Response body, truncated for diagnostics.
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Unexpected HTTP status {status_code}")
        self.status_code = status_code
        self.body = body
