"""Authenticated form-encoded requests to the provider API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import quote, urlencode

import httpx

from twilio_client.credentials import Credentials
from twilio_client.errors import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Params = Sequence[tuple[str, str]]


def account_path(account_sid: str, resource: str) -> str:
    """Return the account-scoped REST path for ``resource`` (e.g. ``"Messages.json"``)."""
    return f"/2010-04-01/Accounts/{quote(account_sid, safe='')}/{resource}"


class RequestBuilder:
    """Issues single-attempt requests against one provider base URL.

    The builder never retries: a failed call surfaces as an exception and
    leaves nothing behind. Retrying a non-idempotent call (such as sending
    an SMS) is the caller's decision.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str,
        client: httpx.AsyncClient,
    ) -> None:
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._client = client

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def send(self, method: str, path: str, params: Params = ()) -> httpx.Response:
        """Send ``params`` form-encoded, in the given order.

        Raises:
            TransportTimeoutError: The request timed out.
            TransportError: Any other network failure.
        """
        url = self.url_for(path)
        headers = {
            "Authorization": self._credentials.authorization_header(),
            "Content-Type": FORM_CONTENT_TYPE,
            "Accept": "application/json",
        }
        logger.debug("%s %s", method, url)
        try:
            resp = await self._client.request(
                method,
                url,
                content=urlencode(list(params)),
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            logger.error("%s %s timed out", method, url)
            raise TransportTimeoutError(f"{method} {url} timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, type(exc).__name__)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug("%s %s -> HTTP %d", method, url, resp.status_code)
        return resp
