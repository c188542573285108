"""
Service token management for the RKD API.

Handles token acquisition, in-memory caching, and renewal ahead of expiry.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from .expiry import (
    DEFAULT_TOKEN_LIFETIME,
    ServiceTokenResponse,
    decode_token_response,
    parse_expiry,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json;charset=utf-8"

DEFAULT_REFRESH_MARGIN = 600.0  # seconds


class AcquisitionError(Exception):
    """Raised when a service token cannot be acquired."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AcquisitionTransportError(AcquisitionError):
    """The token request never produced an HTTP response."""


class AcquisitionRejectedError(AcquisitionError):
    """The token endpoint answered with a non-success status."""


class MalformedTokenResponseError(AcquisitionError):
    """The token endpoint answered successfully but without a usable token."""


@dataclass(frozen=True)
class ServiceIdentity:
    """Long-lived RKD application credentials."""

    application_id: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Credential:
    """Short-lived service token."""

    token: str = field(repr=False)
    expires_at: float  # Unix timestamp


class CredentialAcquirer:
    """Trades a ServiceIdentity for a service token."""

    TOKEN_PATH = (
        "/TokenManagement/TokenManagement.svc/REST/Anonymous"
        "/TokenManagement_1/CreateServiceToken_1"
    )

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        default_lifetime: float = DEFAULT_TOKEN_LIFETIME,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize CredentialAcquirer.

        Args:
            base_url: RKD API base URL
            timeout: Request timeout in seconds
            default_lifetime: Token lifetime assumed when the response has no expiry
            transport: Optional httpx transport (used by tests)
            clock: Returns the current Unix timestamp
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_lifetime = default_lifetime
        self.transport = transport
        self.clock = clock

    @property
    def token_url(self) -> str:
        return f"{self.base_url}{self.TOKEN_PATH}"

    async def acquire(self, identity: ServiceIdentity) -> Credential:
        """
        Request a new service token.

        Args:
            identity: Application id, username and password

        Returns:
            Credential with token and absolute expiry

        Raises:
            AcquisitionTransportError: If the request fails in transport
            AcquisitionRejectedError: If the response status is not success
            MalformedTokenResponseError: If the response carries no token
        """
        payload = {
            "CreateServiceToken_Request_1": {
                "ApplicationID": identity.application_id,
                "Username": identity.username,
                "Password": identity.password,
            }
        }

        logger.info(f"Acquiring service token for application {identity.application_id}")

        try:
            async with httpx.AsyncClient(
                timeout=float(self.timeout), transport=self.transport
            ) as client:
                response = await client.post(
                    self.token_url,
                    headers={"content-type": JSON_CONTENT_TYPE},
                    json=payload,
                )
        except httpx.HTTPError as e:
            raise AcquisitionTransportError(f"Token request failed: {e}") from e

        if not response.is_success:
            raise AcquisitionRejectedError(
                f"Token request rejected with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedTokenResponseError(
                "Token response is not valid JSON",
                status_code=response.status_code,
            ) from e

        decoded = decode_token_response(data)
        if not isinstance(decoded, ServiceTokenResponse) or not decoded.token:
            raise MalformedTokenResponseError(
                "Token response does not contain a token",
                status_code=response.status_code,
            )

        now = self.clock()
        credential = Credential(
            token=decoded.token,
            expires_at=parse_expiry(decoded, now=now, default_lifetime=self.default_lifetime),
        )
        logger.info(f"Service token acquired, expires in {credential.expires_at - now:.0f}s")
        return credential


def _consume_outcome(task: "asyncio.Task[Credential]") -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.debug(f"Service token renewal failed: {task.exception()}")


class TokenCache:
    """Holds the current credential and renews it ahead of expiry."""

    def __init__(
        self,
        acquirer: CredentialAcquirer,
        identity: ServiceIdentity,
        refresh_margin: float = DEFAULT_REFRESH_MARGIN,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize TokenCache.

        Args:
            acquirer: Performs the token exchange on cache miss
            identity: Service identity passed to the acquirer
            refresh_margin: Seconds before expiry at which a token stops being usable
            clock: Returns the current Unix timestamp
        """
        if refresh_margin <= 0:
            raise ValueError("refresh_margin must be positive")
        self.acquirer = acquirer
        self.identity = identity
        self.refresh_margin = refresh_margin
        self.clock = clock
        self._credential: Optional[Credential] = None
        self._pending: Optional["asyncio.Task[Credential]"] = None

    @property
    def credential(self) -> Optional[Credential]:
        """Currently cached credential, usable or not."""
        return self._credential

    def is_usable(self, credential: Credential) -> bool:
        """Check if credential is outside the refresh margin."""
        return self.clock() < credential.expires_at - self.refresh_margin

    async def _renew(self) -> Credential:
        try:
            credential = await self.acquirer.acquire(self.identity)
            self._credential = credential
            return credential
        finally:
            self._pending = None

    async def get_usable_credential(self) -> Credential:
        """
        Get a usable credential, acquiring a new one if necessary.

        Concurrent callers that find no usable credential share a single
        in-flight acquisition.

        Returns:
            Cached or freshly acquired Credential

        Raises:
            AcquisitionError: If acquisition fails
        """
        credential = self._credential
        if credential is not None and self.is_usable(credential):
            logger.debug("Using cached service token")
            return credential

        if self._pending is None:
            logger.debug("No usable service token, renewing...")
            self._pending = asyncio.ensure_future(self._renew())
            # Waiters may all be cancelled; mark the outcome as retrieved anyway
            self._pending.add_done_callback(_consume_outcome)

        # A cancelled caller must not cancel the shared acquisition
        return await asyncio.shield(self._pending)
