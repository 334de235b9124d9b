"""Phone number validation and E.164 normalization."""

from __future__ import annotations

import phonenumbers
from pydantic import BaseModel, ConfigDict, field_validator

from twilio_client.errors import InvalidForRegionError, MalformedPhoneNumberError


class PhoneNumber(BaseModel):
    """A validated phone number in E.164 form.

    Build one with :func:`normalize_phone`. Constructing it directly from an
    E.164 string re-runs validation, so an invalid instance never exists.
    """

    model_config = ConfigDict(frozen=True)

    e164: str

    @field_validator("e164")
    @classmethod
    def _validate_e164(cls, value: str) -> str:
        try:
            parsed = phonenumbers.parse(value, None)
        except phonenumbers.NumberParseException as exc:
            raise ValueError(f"Cannot parse phone number: {value}") from exc
        if not phonenumbers.is_valid_number(parsed):
            raise ValueError(f"Invalid phone number: {value}")
        e164 = phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
        if e164 != value:
            raise ValueError(f"Not in E.164 form: {value}")
        return value

    @property
    def country_code(self) -> int:
        return int(_parse(self.e164).country_code)

    @property
    def national_number(self) -> str:
        return str(_parse(self.e164).national_number)

    @property
    def region(self) -> str | None:
        """ISO 3166-1 alpha-2 region of the number (e.g. ``"KE"``)."""
        return phonenumbers.region_code_for_number(_parse(self.e164))

    def __str__(self) -> str:
        return self.e164


def normalize_phone(raw: str, region_hint: str | None = None, *, field: str = "") -> PhoneNumber:
    """Validate a phone number and canonicalize it to E.164.

    Args:
        raw: Phone number in any common format.
        region_hint: ISO 3166-1 alpha-2 region applied when ``raw`` carries no
            country code. Without a hint, a bare digit string is read as if
            it started with ``+``.
        field: Request parameter name reported on failure (e.g. ``"To"``).

    Returns:
        The validated :class:`PhoneNumber`.

    Raises:
        MalformedPhoneNumberError: If ``raw`` cannot be parsed, or carries an
            extension (``ext. 55``), which has no E.164 form.
        InvalidForRegionError: If the number matches no known numbering plan,
            or ``region_hint`` is not a known region.

    Example:
        >>> normalize_phone("418-555-1234", "CA").e164
        '+14185551234'
        >>> normalize_phone("+254 712 345678").e164
        '+254712345678'
    """
    cleaned = (raw or "").strip()
    if not cleaned:
        raise MalformedPhoneNumberError("Cannot parse phone number: empty value", field=field)

    region = region_hint.upper() if region_hint else None
    if region is not None and region not in phonenumbers.SUPPORTED_REGIONS:
        raise InvalidForRegionError(f"Unknown region: {region_hint}", field=field)

    if region is None and not cleaned.startswith("+"):
        cleaned = f"+{cleaned}"

    try:
        parsed = phonenumbers.parse(cleaned, region)
    except phonenumbers.NumberParseException as exc:
        raise MalformedPhoneNumberError(f"Cannot parse phone number: {raw}", field=field) from exc

    if parsed.extension:
        raise MalformedPhoneNumberError(
            f"Phone number carries an extension, which cannot be sent: {raw}", field=field
        )

    if not phonenumbers.is_valid_number(parsed):
        raise InvalidForRegionError(f"Invalid phone number: {raw}", field=field)

    return PhoneNumber(e164=phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164))


def is_valid_phone(raw: str, region_hint: str | None = None) -> bool:
    """Check if a phone number is valid."""
    try:
        normalize_phone(raw, region_hint)
        return True
    except (MalformedPhoneNumberError, InvalidForRegionError):
        return False


def _parse(e164: str) -> phonenumbers.PhoneNumber:
    return phonenumbers.parse(e164, None)
