"""Twilio client configuration."""

from __future__ import annotations

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

API_BASE_URL = "https://api.twilio.com"
VERIFY_BASE_URL = "https://verify.twilio.com"


class TwilioConfig(BaseModel):
    """Configuration shared by the SMS and Verify clients."""

    account_sid: str
    auth_token: SecretStr
    from_number: str | None = None
    messaging_service_sid: str | None = None
    verify_service_sid: str | None = None
    api_base_url: str = API_BASE_URL
    verify_base_url: str = VERIFY_BASE_URL
    default_region: str | None = "US"
    timeout: float = 10.0


class TwilioSettings(BaseSettings):
    """Loads a :class:`TwilioConfig` from ``TWILIO_*`` environment variables.

    Example::

        TWILIO_ACCOUNT_SID=AC... TWILIO_AUTH_TOKEN=... python app.py

        config = TwilioSettings().to_config()
    """

    model_config = SettingsConfigDict(env_prefix="TWILIO_", env_file=".env", extra="ignore")

    account_sid: str
    auth_token: SecretStr
    from_number: str | None = None
    messaging_service_sid: str | None = None
    verify_service_sid: str | None = None
    api_base_url: str = API_BASE_URL
    verify_base_url: str = VERIFY_BASE_URL
    default_region: str | None = "US"
    timeout: float = 10.0

    def to_config(self) -> TwilioConfig:
        return TwilioConfig(**self.model_dump())
