"""Map raw provider responses to typed results or errors."""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from twilio_client.errors import (
    AuthenticationError,
    MalformedResponseError,
    ProviderError,
    UnexpectedStatusError,
)
from twilio_client.models import ErrorEnvelope

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

MAX_DIAGNOSTIC_BODY = 512


def interpret(response: httpx.Response, model: type[T]) -> T:
    """Turn a provider response into ``model`` or raise a :class:`ClientError`.

    Raises:
        MalformedResponseError: 2xx response whose body does not fit ``model``.
        AuthenticationError: 401 response carrying a provider error envelope.
        ProviderError: Other error responses carrying a provider error envelope.
        UnexpectedStatusError: Error responses without a parseable envelope.
    """
    status = response.status_code
    body = response.text

    if response.is_success:
        try:
            return model.model_validate_json(body)
        except ValidationError as exc:
            logger.warning("Undecodable %s response (HTTP %d)", model.__name__, status)
            raise MalformedResponseError(
                f"Cannot decode {model.__name__} from HTTP {status} response"
            ) from exc

    try:
        envelope = ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        logger.warning("HTTP %d without provider error envelope", status)
        raise UnexpectedStatusError(status, body[:MAX_DIAGNOSTIC_BODY]) from None

    logger.warning("Provider error %d (HTTP %d)", envelope.code, status)
    error_cls = AuthenticationError if status == 401 else ProviderError
    raise error_cls(
        envelope.code,
        envelope.message,
        more_info=envelope.more_info,
        status_code=status,
    )
