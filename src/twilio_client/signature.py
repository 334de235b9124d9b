"""Webhook signature verification (``X-Twilio-Signature``)."""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from pydantic import BaseModel

if TYPE_CHECKING:
    from twilio_client.credentials import Credentials

SIGNATURE_HEADER = "X-Twilio-Signature"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

FormParams = Mapping[str, str | Sequence[str]]
Payload = FormParams | bytes | str

_DEFAULT_PORTS = {"https": 443, "http": 80}


class WebhookSignature(BaseModel):
    """An inbound callback as received by the host application.

    Attributes:
        payload: Raw request body, or the already-parsed form parameters.
        url: Full callback URL as the provider called it, query string included.
        signature: Value of the ``X-Twilio-Signature`` header.
        content_type: ``Content-Type`` header of the callback, if known.
    """

    payload: dict[str, str | list[str]] | bytes | str
    url: str
    signature: str
    content_type: str | None = None

    @classmethod
    def from_headers(
        cls,
        url: str,
        payload: dict[str, str | list[str]] | bytes | str,
        headers: Mapping[str, str],
    ) -> WebhookSignature:
        """Build from the request headers; a missing signature header yields ``""``.

        Header names are matched case-insensitively.
        """
        lowered = {name.lower(): value for name, value in headers.items()}
        return cls(
            payload=payload,
            url=url,
            signature=lowered.get(SIGNATURE_HEADER.lower(), ""),
            content_type=lowered.get("content-type"),
        )


def compute_signature(
    url: str,
    payload: Payload,
    auth_token: str | bytes,
    content_type: str | None = None,
) -> str:
    """Compute the base64 HMAC-SHA1 signature the provider sends for a callback.

    Form callbacks sign ``url`` followed by every parameter as ``key + value``
    in ascending key order. Other bodies (e.g. JSON) sign ``url`` followed by
    the raw body.

    Raises:
        ValueError: If a bytes payload is not valid UTF-8.
    """
    key = auth_token.encode() if isinstance(auth_token, str) else auth_token
    data = url.encode() + _signed_payload(payload, content_type)
    return base64.b64encode(hmac.new(key, data, hashlib.sha1).digest()).decode()


def verify_signature(
    payload: Payload,
    url: str,
    signature: str,
    auth_token: str | bytes,
    content_type: str | None = None,
) -> bool:
    """Verify a webhook signature in constant time.

    Args:
        payload: Form parameters as a mapping, or the raw request body.
        url: Full URL the provider called, including the query string.
        signature: Value of the ``X-Twilio-Signature`` header.
        auth_token: Account auth token used as the HMAC key.
        content_type: Request ``Content-Type``. A mapping payload is always
            treated as form parameters; a raw body is treated as form-encoded
            unless the content type says otherwise.

    Returns:
        True if the signature is valid, False otherwise (never raises).
    """
    if not url or not signature:
        return False
    try:
        provided = signature.encode("ascii")
        for candidate in _url_variants(url):
            expected = compute_signature(candidate, payload, auth_token, content_type).encode()
            if hmac.compare_digest(expected, provided):
                return True
    except (AttributeError, UnicodeError, ValueError, TypeError):
        return False
    return False


class SignatureVerifier:
    """Verifies callbacks using the account's auth token."""

    def __init__(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def verify(self, webhook: WebhookSignature) -> bool:
        return verify_signature(
            webhook.payload,
            webhook.url,
            webhook.signature,
            self._credentials.signing_key(),
            content_type=webhook.content_type,
        )


def _is_form(content_type: str | None) -> bool:
    if content_type is None:
        return True
    return content_type.split(";", 1)[0].strip().lower() == FORM_CONTENT_TYPE


def _signed_payload(payload: Payload, content_type: str | None) -> bytes:
    if isinstance(payload, Mapping):
        return _concat_params(_flatten(payload)).encode()

    if not _is_form(content_type):
        return payload if isinstance(payload, bytes) else payload.encode()
    body = payload.decode() if isinstance(payload, bytes) else payload
    return _concat_params(parse_qsl(body, keep_blank_values=True)).encode()


def _flatten(params: FormParams) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, v) for v in value)
    return pairs


def _concat_params(pairs: list[tuple[str, str]]) -> str:
    return "".join(key + value for key, value in sorted(pairs))


def _url_variants(url: str) -> list[str]:
    """Return ``url`` plus the same URL with its default port toggled.

    The provider signs the URL exactly as it dialled it, which may or may not
    include the port when the callback sits behind a proxy.
    """
    parts = urlsplit(url)
    default_port = _DEFAULT_PORTS.get(parts.scheme)
    if default_port is None or not parts.hostname:
        return [url]

    host = f"[{parts.hostname}]" if ":" in parts.hostname else parts.hostname
    if parts.username or parts.password:
        userinfo = parts.username or ""
        if parts.password:
            userinfo += f":{parts.password}"
        host = f"{userinfo}@{host}"

    if parts.port is None:
        netloc = f"{host}:{default_port}"
    elif parts.port == default_port:
        netloc = host
    else:
        return [url]
    return [url, urlunsplit(parts._replace(netloc=netloc))]
