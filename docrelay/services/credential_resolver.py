"""
Select exactly one authentication path for an edit request.

Precedence, first applicable wins:
  1. OAuth access token  -> validated against Google's tokeninfo endpoint
  2. session blob        -> restored directly into the browser context
  3. lookup key          -> saved session fetched from the credential store
Nothing usable raises AuthenticationRequired.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx

from docrelay.errors import AuthenticationInvalid, AuthenticationRequired, AutomationFailure
from docrelay.schemas.edit_schema import EditDocRequest
from docrelay.services.platform_detector import PlatformDescriptor
from docrelay.storage.credentials_repo import InvalidIdError

logger = logging.getLogger(__name__)


class AuthMode(str, Enum):
    OAUTH = "oauth"
    SESSION = "session"
    STORED = "stored"


@dataclass
class ResolvedCredential:
    mode: AuthMode
    storage_state: dict | None = None
    access_token: str | None = None


class CredentialStore(Protocol):
    def get(self, user_id: str, platform: str) -> dict | None:
        ...


class TokenValidator:
    """Best-effort OAuth access token check against a tokeninfo endpoint."""

    def __init__(self, tokeninfo_url: str, timeout_s: float = 15.0, transport: httpx.AsyncBaseTransport | None = None):
        self.tokeninfo_url = tokeninfo_url
        self.timeout_s = timeout_s
        self._transport = transport

    async def validate(self, access_token: str) -> dict:
        """Return the token info payload or raise AuthenticationInvalid."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.get(self.tokeninfo_url, params={"access_token": access_token})
        except httpx.HTTPError as exc:
            raise AuthenticationInvalid(f"Token validation failed: {exc}") from exc

        try:
            info = response.json()
        except ValueError:
            info = {}
        if not isinstance(info, dict):
            info = {}

        if response.status_code != 200 or "error" in info:
            reason = info.get("error_description") or info.get("error") or f"HTTP {response.status_code}"
            raise AuthenticationInvalid(f"Token validation failed: {reason}")
        return info


class CredentialResolver:
    def __init__(
        self,
        store: CredentialStore,
        validator: TokenValidator,
        default_user_id: str | None = None,
    ):
        self.store = store
        self.validator = validator
        self.default_user_id = default_user_id

    async def resolve(self, request: EditDocRequest, platform: PlatformDescriptor) -> ResolvedCredential:
        access_token = request.credentials.access_token if request.credentials else None
        if access_token:
            info = await self.validator.validate(access_token)
            logger.info("auth mode=oauth platform=%s email=%s", platform.name, info.get("email", "unknown"))
            return ResolvedCredential(mode=AuthMode.OAUTH, access_token=access_token)

        if request.auth_state:
            logger.info("auth mode=session platform=%s", platform.name)
            return ResolvedCredential(mode=AuthMode.SESSION, storage_state=request.auth_state)

        lookup_key = request.user_id or self.default_user_id
        if lookup_key:
            try:
                stored = self.store.get(lookup_key, platform.credential_key)
            except InvalidIdError as exc:
                raise AuthenticationRequired(
                    str(exc), platform=platform.name, login_url=platform.login_url
                ) from exc
            except (OSError, ValueError) as exc:
                logger.error("credential store read failed platform=%s error=%s", platform.name, exc)
                raise AutomationFailure(f"Saved {platform.name} session could not be read: {exc}") from exc
            if stored:
                logger.info("auth mode=stored platform=%s", platform.name)
                return ResolvedCredential(mode=AuthMode.STORED, storage_state=stored)
            raise AuthenticationRequired(
                f"No saved {platform.name} session for this user. Please log in.",
                platform=platform.name,
                login_url=platform.login_url,
            )

        raise AuthenticationRequired(
            "Authentication credentials are required. Include 'credentials' "
            "(OAuth tokens), 'authState' or 'userId' in the request.",
            platform=platform.name,
            login_url=platform.login_url,
        )
