"""
Token response decoding and expiry parsing.

The token-management endpoint does not return a fixed shape: the RKD
envelope nests the token under ``CreateServiceToken_Response_1`` while other
deployments answer with a flat object, and the expiry may be an ISO-8601
timestamp, a lifetime in seconds, or missing entirely. Everything here reads
fields defensively and never raises.
"""

import math
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Union

DEFAULT_TOKEN_LIFETIME = 3600.0  # seconds

RESPONSE_ENVELOPE = "CreateServiceToken_Response_1"

TOKEN_FIELDS = ("Token", "token", "access_token")
EXPIRATION_FIELDS = (
    "TokenExpiration",
    "Expiration",
    "ExpiresAt",
    "expiration",
    "expires_at",
    "expiresAt",
)
LIFETIME_FIELDS = ("ExpiresIn", "expires_in", "expiresIn", "Lifetime")

# RKD sends up to 7 fractional digits; fromisoformat on 3.10 accepts 3 or 6
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


@dataclass(frozen=True)
class ServiceTokenResponse:
    """A token response whose fields could be located."""

    token: Optional[str]
    expiration: Any = None
    lifetime: Any = None


@dataclass(frozen=True)
class UnrecognizedResponse:
    """Anything that is not a JSON object."""

    raw: Any


TokenResponse = Union[ServiceTokenResponse, UnrecognizedResponse]


def _first_present(data: dict, fields: tuple[str, ...]) -> Any:
    for field in fields:
        value = data.get(field)
        if value is not None and value != "":
            return value
    return None


def decode_token_response(data: Any) -> TokenResponse:
    """
    Decode a raw token-management response into a known variant.

    Args:
        data: Decoded JSON body of the acquisition response

    Returns:
        ServiceTokenResponse for JSON objects, UnrecognizedResponse otherwise
    """
    if not isinstance(data, dict):
        return UnrecognizedResponse(raw=data)

    body = data.get(RESPONSE_ENVELOPE)
    if not isinstance(body, dict):
        body = data

    token = _first_present(body, TOKEN_FIELDS)
    return ServiceTokenResponse(
        token=token if isinstance(token, str) else None,
        expiration=_first_present(body, EXPIRATION_FIELDS),
        lifetime=_first_present(body, LIFETIME_FIELDS),
    )


def _parse_timestamp(value: Any) -> Optional[float]:
    """Parse an ISO-8601 string to a Unix timestamp, or None if malformed."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _parse_lifetime(value: Any) -> Optional[float]:
    # bool is an int subclass but never a lifetime
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        lifetime = float(value)
    elif isinstance(value, str):
        try:
            lifetime = float(value)
        except ValueError:
            return None
    else:
        return None
    return lifetime if math.isfinite(lifetime) else None


def parse_expiry(
    response: Any,
    now: Optional[float] = None,
    default_lifetime: float = DEFAULT_TOKEN_LIFETIME,
) -> float:
    """
    Compute the absolute expiry of a freshly acquired token.

    Checks, in order, an ISO-8601 expiration field, a numeric lifetime in
    seconds, and finally falls back to ``default_lifetime`` from ``now``.

    Args:
        response: Raw decoded response or an already decoded TokenResponse
        now: Current Unix timestamp (defaults to time.time())
        default_lifetime: Lifetime in seconds used when no field is usable

    Returns:
        Expiry as a Unix timestamp
    """
    if now is None:
        now = time.time()

    if not isinstance(response, (ServiceTokenResponse, UnrecognizedResponse)):
        response = decode_token_response(response)

    if isinstance(response, ServiceTokenResponse):
        expires_at = _parse_timestamp(response.expiration)
        if expires_at is not None:
            return expires_at

        lifetime = _parse_lifetime(response.lifetime)
        if lifetime is not None:
            return now + lifetime

    return now + default_lifetime
