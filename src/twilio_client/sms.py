"""SMS client: send messages through the provider's Messages API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType

import httpx

from twilio_client.config import TwilioConfig
from twilio_client.credentials import Credentials
from twilio_client.errors import ConfigError, MessageBodyError
from twilio_client.models import (
    MAX_BODY_LENGTH,
    MAX_MEDIA_URLS,
    MessageResource,
    OutboundMessage,
)
from twilio_client.phone import normalize_phone
from twilio_client.request import RequestBuilder, account_path
from twilio_client.response import interpret

logger = logging.getLogger(__name__)


class TwilioSMSClient:
    """Sends SMS/MMS messages.

    Phone numbers are validated and normalized to E.164 before anything is
    sent; invalid input raises without touching the network.

    Example::

        async with TwilioSMSClient(config) as sms:
            message = await sms.send_message("+15558675310", "Hello!")
            print(message.sid, message.status)
    """

    def __init__(self, config: TwilioConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._credentials = Credentials.from_config(config)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._requests = RequestBuilder(self._credentials, config.api_base_url, self._client)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def build_message(
        self,
        to: str,
        body: str,
        *,
        from_: str | None = None,
        media_urls: Sequence[str] | None = None,
    ) -> OutboundMessage:
        """Validate and normalize a message without sending it.

        Raises:
            MalformedPhoneNumberError: ``to`` or the sender cannot be parsed.
            InvalidForRegionError: ``to`` or the sender is not a valid number.
            MessageBodyError: Empty body (without media) or body too long.
            ConfigError: No sender number and no messaging service configured.
        """
        region = self._config.default_region
        media = tuple(media_urls or ())

        if not body and not media:
            raise MessageBodyError("Message body must not be empty", field="Body")
        if len(body) > MAX_BODY_LENGTH:
            raise MessageBodyError(
                f"Message body is {len(body)} characters; the limit is {MAX_BODY_LENGTH}",
                field="Body",
            )
        if len(media) > MAX_MEDIA_URLS:
            raise MessageBodyError(
                f"At most {MAX_MEDIA_URLS} media URLs are allowed", field="MediaUrl"
            )

        sender = from_ or self._config.from_number
        if sender is None and not self._config.messaging_service_sid:
            raise ConfigError("Either from_number or messaging_service_sid is required")

        return OutboundMessage(
            to=normalize_phone(to, region, field="To"),
            body=body,
            from_=normalize_phone(sender, region, field="From") if sender else None,
            media_urls=media,
        )

    async def send_message(
        self,
        to: str,
        body: str,
        *,
        from_: str | None = None,
        media_urls: Sequence[str] | None = None,
        status_callback: str | None = None,
        send_as_mms: bool | None = None,
    ) -> MessageResource:
        """Send a message.

        Args:
            to: Recipient phone number, any common format.
            body: Message text. Never truncated; over-long bodies are rejected.
            from_: Sender number override. Defaults to ``config.from_number``,
                then to ``config.messaging_service_sid``.
            media_urls: Up to 10 publicly reachable media URLs (MMS).
            status_callback: URL the provider calls with delivery updates.
            send_as_mms: Force MMS delivery.

        Returns:
            The provider's message resource (``sid``, ``status``, ...).

        Raises:
            InputValidationError: Local validation failed; nothing was sent.
            TransportError: The request could not be delivered.
            ClientError: The provider rejected the request or answered
                with something unreadable.
        """
        message = self.build_message(to, body, from_=from_, media_urls=media_urls)

        params: list[tuple[str, str]] = [("To", message.to.e164)]
        if message.from_ is not None:
            params.append(("From", message.from_.e164))
        else:
            params.append(("MessagingServiceSid", self._config.messaging_service_sid or ""))
        if message.body:
            params.append(("Body", message.body))
        params.extend(("MediaUrl", url) for url in message.media_urls)
        if status_callback:
            params.append(("StatusCallback", status_callback))
        if send_as_mms is not None:
            params.append(("SendAsMms", "true" if send_as_mms else "false"))

        resp = await self._requests.send(
            "POST",
            account_path(self._credentials.account_sid, "Messages.json"),
            params,
        )
        result = interpret(resp, MessageResource)
        logger.info("Message %s %s", result.sid, result.status)
        return result

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> TwilioSMSClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
