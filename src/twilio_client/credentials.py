"""Account credentials holder."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

from pydantic import SecretStr

from twilio_client.errors import ConfigError

if TYPE_CHECKING:
    from twilio_client.config import TwilioConfig


class Credentials:
    """Account SID and auth token for HTTP Basic auth and webhook signing.

    The token is kept in a :class:`~pydantic.SecretStr` and only leaves it
    through :meth:`authorization_header` and :meth:`signing_key`. Instances
    are immutable and safe to share across concurrent requests.
    """

    __slots__ = ("_account_sid", "_auth_token")

    _account_sid: str
    _auth_token: SecretStr

    def __init__(self, account_sid: str, auth_token: str | SecretStr) -> None:
        token = auth_token if isinstance(auth_token, SecretStr) else SecretStr(auth_token or "")
        if not account_sid or not account_sid.strip():
            raise ConfigError("account_sid must not be empty")
        if not token.get_secret_value().strip():
            raise ConfigError("auth_token must not be empty")
        object.__setattr__(self, "_account_sid", account_sid)
        object.__setattr__(self, "_auth_token", token)

    @classmethod
    def from_config(cls, config: TwilioConfig) -> Credentials:
        return cls(config.account_sid, config.auth_token)

    @property
    def account_sid(self) -> str:
        return self._account_sid

    def authorization_header(self) -> str:
        """Return the ``Authorization`` header value, built fresh on each call."""
        raw = f"{self._account_sid}:{self._auth_token.get_secret_value()}"
        return "Basic " + base64.b64encode(raw.encode()).decode()

    def signing_key(self) -> bytes:
        """Return the raw token bytes used as the webhook HMAC key."""
        return self._auth_token.get_secret_value().encode()

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"Credentials(account_sid={self._account_sid!r}, auth_token='**********')"

    __str__ = __repr__
