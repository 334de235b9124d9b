"""Tests for the SMS client."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest
from pydantic import SecretStr

from twilio_client import (
    ConfigError,
    InvalidForRegionError,
    MalformedPhoneNumberError,
    MessageBodyError,
    MessageStatus,
    ProviderError,
    TransportTimeoutError,
    TwilioConfig,
    TwilioSMSClient,
)


def _config(**overrides: Any) -> TwilioConfig:
    defaults: dict[str, Any] = {
        "account_sid": "ACtest123",
        "auth_token": SecretStr("secret123"),
        "from_number": "+15145551234",
        "api_base_url": "https://api.test",
    }
    defaults.update(overrides)
    return TwilioConfig(**defaults)


def _success_response(sid: str = "SM123") -> dict[str, Any]:
    return {"sid": sid, "status": "queued", "date_created": "2026-01-28T12:00:00Z"}


class _MockTransport(httpx.AsyncBaseTransport):
    """Captures requests and returns a canned JSON response."""

    def __init__(self, response_data: dict[str, Any], status_code: int = 201) -> None:
        self._response_data = response_data
        self._status_code = status_code
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await asyncio.sleep(0)
        return httpx.Response(self._status_code, json=self._response_data, request=request)


class _StallFirstTransport(_MockTransport):
    """Blocks the first request until cancelled; later requests answer at once."""

    def __init__(self, response_data: dict[str, Any]) -> None:
        super().__init__(response_data)
        self.calls = 0
        self.first_call_started = asyncio.Event()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.calls == 1:
            self.first_call_started.set()
            await asyncio.Event().wait()
        return await super().handle_async_request(request)


class _TimeoutTransport(httpx.AsyncBaseTransport):
    def __init__(self) -> None:
        self.calls = 0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        raise httpx.ReadTimeout("timed out")


def _client(transport: httpx.AsyncBaseTransport, **overrides: Any) -> TwilioSMSClient:
    return TwilioSMSClient(_config(**overrides), client=httpx.AsyncClient(transport=transport))


def _form(request: httpx.Request) -> list[tuple[str, str]]:
    return parse_qsl(request.read().decode())


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_send_success(self) -> None:
        transport = _MockTransport(_success_response("SM123"))
        sms = _client(transport)

        result = await sms.send_message("+15145559999", "Hello")

        assert result.sid == "SM123"
        assert result.status is MessageStatus.QUEUED
        req = transport.requests[0]
        assert str(req.url) == "https://api.test/2010-04-01/Accounts/ACtest123/Messages.json"
        assert req.method == "POST"
        assert _form(req) == [("To", "+15145559999"), ("From", "+15145551234"), ("Body", "Hello")]

    @pytest.mark.asyncio
    async def test_numbers_are_normalized(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        await sms.send_message("(514) 555-9999", "Hi", from_="514.555.0000")

        form = dict(_form(transport.requests[0]))
        assert form["To"] == "+15145559999"
        assert form["From"] == "+15145550000"

    @pytest.mark.asyncio
    async def test_messaging_service(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport, from_number=None, messaging_service_sid="MG123")

        await sms.send_message("+15145559999", "Hi")

        form = dict(_form(transport.requests[0]))
        assert form["MessagingServiceSid"] == "MG123"
        assert "From" not in form

    @pytest.mark.asyncio
    async def test_no_sender_configured(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport, from_number=None)

        with pytest.raises(ConfigError):
            await sms.send_message("+15145559999", "Hi")
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_media_and_options(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        await sms.send_message(
            "+15145559999",
            "",
            media_urls=["https://example.com/a.jpg", "https://example.com/b.png"],
            status_callback="https://example.com/status",
            send_as_mms=True,
        )

        form = _form(transport.requests[0])
        assert [v for k, v in form if k == "MediaUrl"] == [
            "https://example.com/a.jpg",
            "https://example.com/b.png",
        ]
        assert ("StatusCallback", "https://example.com/status") in form
        assert ("SendAsMms", "true") in form
        assert "Body" not in dict(form)

    @pytest.mark.asyncio
    async def test_provider_error(self) -> None:
        transport = _MockTransport(
            {"code": 21211, "message": "Invalid 'To' Phone Number", "more_info": "..."},
            status_code=400,
        )
        sms = _client(transport)

        with pytest.raises(ProviderError) as exc_info:
            await sms.send_message("+15145559999", "Hi")
        assert exc_info.value.code == 21211

    @pytest.mark.asyncio
    async def test_timeout_is_not_retried(self) -> None:
        transport = _TimeoutTransport()
        sms = _client(transport)

        with pytest.raises(TransportTimeoutError):
            await sms.send_message("+15145559999", "Hi")
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_sends(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)
        header_before = sms.credentials.authorization_header()

        results = await asyncio.gather(
            *(sms.send_message("+15145559999", f"msg {i}") for i in range(25))
        )

        assert len(results) == 25
        assert len(transport.requests) == 25
        bodies = sorted(dict(_form(r))["Body"] for r in transport.requests)
        assert bodies == sorted(f"msg {i}" for i in range(25))
        assert all(r.headers["authorization"] == header_before for r in transport.requests)
        assert sms.credentials.authorization_header() == header_before

    @pytest.mark.asyncio
    async def test_cancelled_send_leaves_client_usable(self) -> None:
        transport = _StallFirstTransport(_success_response("SM1"))
        sms = _client(transport)
        header_before = sms.credentials.authorization_header()

        task = asyncio.create_task(sms.send_message("+15145559999", "first"))
        await transport.first_call_started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        result = await sms.send_message("+15145559999", "second")

        assert result.sid == "SM1"
        assert transport.calls == 2
        assert sms.credentials.authorization_header() == header_before


class TestLocalValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("to", ["not-a-number", ""])
    async def test_malformed_recipient(self, to: str) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        with pytest.raises(MalformedPhoneNumberError) as exc_info:
            await sms.send_message(to, "Hi")

        assert exc_info.value.field == "To"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_invalid_sender(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        with pytest.raises(InvalidForRegionError) as exc_info:
            await sms.send_message("+15145559999", "Hi", from_="123")

        assert exc_info.value.field == "From"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_empty_body(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        with pytest.raises(MessageBodyError):
            await sms.send_message("+15145559999", "")
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_body_too_long_is_not_truncated(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        with pytest.raises(MessageBodyError, match="1601"):
            await sms.send_message("+15145559999", "x" * 1601)
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_body_at_limit_is_sent_whole(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        await sms.send_message("+15145559999", "x" * 1600)
        assert dict(_form(transport.requests[0]))["Body"] == "x" * 1600

    @pytest.mark.asyncio
    async def test_too_many_media_urls(self) -> None:
        transport = _MockTransport(_success_response())
        sms = _client(transport)

        with pytest.raises(MessageBodyError):
            await sms.send_message(
                "+15145559999", "Hi", media_urls=[f"https://x/{i}" for i in range(11)]
            )
        assert transport.requests == []

    def test_build_message(self) -> None:
        sms = _client(_MockTransport(_success_response()))
        message = sms.build_message("514 555 9999", "Hi")
        assert message.to.e164 == "+15145559999"
        assert message.from_ is not None
        assert message.from_.e164 == "+15145551234"


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self) -> None:
        http = httpx.AsyncClient(transport=_MockTransport(_success_response()))
        async with TwilioSMSClient(_config(), client=http):
            pass
        assert http.is_closed is False
        await http.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self) -> None:
        sms = TwilioSMSClient(_config())
        await sms.close()
        assert sms._client.is_closed is True

    def test_repr_hides_token(self) -> None:
        sms = _client(_MockTransport(_success_response()))
        assert "secret123" not in repr(sms.credentials)
        assert "secret123" not in repr(_config())

    def test_empty_token_rejected(self) -> None:
        with pytest.raises(ConfigError):
            TwilioSMSClient(_config(auth_token=SecretStr("")))


class TestLogging:
    @pytest.mark.asyncio
    async def test_secrets_and_body_never_logged(
        self, debug_logs: pytest.LogCaptureFixture
    ) -> None:
        transport = _MockTransport(_success_response("SM-LOG"))
        sms = _client(transport)

        await sms.send_message("+15145559999", "top secret body")

        assert "SM-LOG" in debug_logs.text
        assert "Messages.json" in debug_logs.text
        assert "secret123" not in debug_logs.text
        assert "Basic " not in debug_logs.text
        assert "top secret body" not in debug_logs.text

    @pytest.mark.asyncio
    async def test_provider_error_logged_without_secrets(
        self, debug_logs: pytest.LogCaptureFixture
    ) -> None:
        transport = _MockTransport({"code": 21211, "message": "Invalid"}, status_code=400)
        sms = _client(transport)

        with pytest.raises(ProviderError):
            await sms.send_message("+15145559999", "Hi")

        assert "21211" in debug_logs.text
        assert "secret123" not in debug_logs.text
