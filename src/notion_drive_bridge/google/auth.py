"""Service-account token minting for the Google Drive API.

Implements the OAuth2 JWT-bearer grant: a short-lived RS256 assertion signed
with the service account's private key is exchanged at the token endpoint for
a bearer access token.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx
import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from notion_drive_bridge.config import DRIVE_SCOPE, GOOGLE_TOKEN_URI
from notion_drive_bridge.errors import AuthError

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600
# Cached tokens are refreshed this long before they actually expire.
REFRESH_MARGIN_SECONDS = 60


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: int  # epoch seconds

    def is_fresh(self, now: float, margin: int = REFRESH_MARGIN_SECONDS) -> bool:
        return now < self.expires_at - margin


def normalize_private_key(pem: str) -> str:
    """Turn literal ``\\n`` escapes (as stored in env vars) into real newlines."""
    return pem.strip().strip('"').replace("\\n", "\n")


def load_private_key(pem: str) -> RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(
            normalize_private_key(pem).encode(), password=None
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise AuthError(f"Cannot parse service account private key: {exc}") from exc
    if not isinstance(key, RSAPrivateKey):
        raise AuthError("Service account private key is not an RSA key")
    return key


class TokenMinter:
    def __init__(
        self,
        service_account_email: str,
        private_key_pem: str,
        *,
        scope: str = DRIVE_SCOPE,
        token_endpoint: str = GOOGLE_TOKEN_URI,
        reuse_tokens: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._email = service_account_email
        self._private_key_pem = private_key_pem
        self._scope = scope
        self._token_endpoint = token_endpoint
        self._reuse_tokens = reuse_tokens
        self._clock = clock
        self._client = httpx.AsyncClient(transport=transport, timeout=30.0)
        self._cached: AccessToken | None = None
        self._lock = asyncio.Lock()

    async def close(self) -> None:
        await self._client.aclose()

    def build_assertion(self, issued_at: int | None = None) -> str:
        """Build the signed JWT assertion for the token exchange."""
        iat = int(self._clock()) if issued_at is None else issued_at
        claims = {
            "iss": self._email,
            "scope": self._scope,
            "aud": self._token_endpoint,
            "iat": iat,
            "exp": iat + ASSERTION_LIFETIME_SECONDS,
        }
        key = load_private_key(self._private_key_pem)
        try:
            return jwt.encode(claims, key, algorithm="RS256", headers={"typ": "JWT"})
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise AuthError(f"Failed to sign assertion: {exc}") from exc

    async def mint(self) -> AccessToken:
        """Exchange a fresh assertion for an access token."""
        iat = int(self._clock())
        assertion = self.build_assertion(iat)

        try:
            resp = await self._client.post(
                self._token_endpoint,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
            )
        except httpx.TimeoutException as exc:
            raise AuthError("Token endpoint timed out", retryable=True) from exc
        except httpx.HTTPError as exc:
            raise AuthError(f"Token endpoint request failed: {exc}") from exc

        if not resp.is_success:
            raise AuthError(
                f"Token endpoint returned {resp.status_code}: {resp.text[:200]}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise AuthError("Token endpoint returned a non-JSON body") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("Token endpoint response has no access_token")

        try:
            expires_in = int(data.get("expires_in") or ASSERTION_LIFETIME_SECONDS)
        except (TypeError, ValueError):
            expires_in = ASSERTION_LIFETIME_SECONDS
        logger.debug("Minted Drive access token for %s", self._email)
        return AccessToken(value=token, expires_at=iat + expires_in)

    async def get_token(self) -> str:
        """Return a bearer token, reusing a cached one when reuse is enabled."""
        if not self._reuse_tokens:
            return (await self.mint()).value

        async with self._lock:
            if self._cached is None or not self._cached.is_fresh(self._clock()):
                self._cached = await self.mint()
            return self._cached.value

    def invalidate(self) -> None:
        """Drop the cached token so the next call mints a new one."""
        self._cached = None
