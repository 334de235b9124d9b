"""Verify client: start and check one-time-code verifications."""

from __future__ import annotations

import logging
import re
from types import TracebackType
from urllib.parse import quote

import httpx

from twilio_client.config import TwilioConfig
from twilio_client.credentials import Credentials
from twilio_client.errors import ConfigError, InvalidRecipientError
from twilio_client.models import (
    Verification,
    VerificationChannel,
    VerificationCheck,
    VerificationCheckResult,
    VerificationRequest,
)
from twilio_client.phone import normalize_phone
from twilio_client.request import RequestBuilder
from twilio_client.response import interpret

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CODE_RE = re.compile(r"^[0-9A-Za-z]{4,10}$")


class TwilioVerifyClient:
    """Starts and checks verifications for one Verify service.

    Outcomes are reported, never acted on: a denied or expired check is
    returned to the caller as-is, and nothing is retried.
    """

    def __init__(self, config: TwilioConfig, client: httpx.AsyncClient | None = None) -> None:
        if not config.verify_service_sid:
            raise ConfigError("verify_service_sid is required for TwilioVerifyClient")
        self._config = config
        self._service_sid: str = config.verify_service_sid
        self._credentials = Credentials.from_config(config)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._requests = RequestBuilder(self._credentials, config.verify_base_url, self._client)

    def _service_path(self, resource: str) -> str:
        return f"/v2/Services/{quote(self._service_sid, safe='')}/{resource}"

    def _recipient(self, to: str, channel: VerificationChannel) -> str:
        if channel is VerificationChannel.EMAIL:
            address = to.strip()
            if not _EMAIL_RE.match(address):
                raise InvalidRecipientError(f"Invalid email address: {to}", field="To")
            return address
        return normalize_phone(to, self._config.default_region, field="To").e164

    async def start_verification(
        self,
        to: str,
        channel: VerificationChannel | str = VerificationChannel.SMS,
        *,
        locale: str | None = None,
    ) -> Verification:
        """Send a verification code to ``to`` over ``channel``.

        Returns:
            The new verification; ``sid`` identifies it and ``status`` is
            normally ``pending``.

        Raises:
            InputValidationError: ``to`` is invalid for the channel.
            TransportError: The request could not be delivered.
            ClientError: The provider rejected the request.
        """
        channel = _channel(channel)
        request = VerificationRequest(
            to=self._recipient(to, channel),
            channel=channel,
            locale=locale,
        )

        params = [("To", request.to), ("Channel", request.channel.value)]
        if request.locale:
            params.append(("Locale", request.locale))

        resp = await self._requests.send("POST", self._service_path("Verifications"), params)
        verification = interpret(resp, Verification)
        logger.info("Verification %s started via %s", verification.sid, request.channel)
        return verification

    async def check_verification(
        self,
        to: str,
        code: str,
        *,
        channel: VerificationChannel | str = VerificationChannel.SMS,
    ) -> VerificationCheckResult:
        """Check a code the end user entered.

        A wrong code is not an error: the provider answers with a
        non-approved status (typically ``pending``) which is returned as-is.

        Raises:
            InputValidationError: ``to`` or ``code`` is malformed.
            TransportError: The request could not be delivered.
            ClientError: The provider rejected the request (e.g. error
                ``20404`` once the verification expired or was approved).
        """
        code = code.strip()
        if not _CODE_RE.match(code):
            raise InvalidRecipientError(
                "Verification code must be 4-10 letters or digits", field="Code"
            )
        check = VerificationCheck(to=self._recipient(to, _channel(channel)), code=code)

        resp = await self._requests.send(
            "POST",
            self._service_path("VerificationCheck"),
            [("To", check.to), ("Code", check.code)],
        )
        result = interpret(resp, VerificationCheckResult)
        logger.info("Verification %s checked: %s", result.sid, result.status)
        return result

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> TwilioVerifyClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def _channel(value: VerificationChannel | str) -> VerificationChannel:
    try:
        return VerificationChannel(value)
    except ValueError:
        raise InvalidRecipientError(
            f"Unknown verification channel: {value}", field="Channel"
        ) from None
