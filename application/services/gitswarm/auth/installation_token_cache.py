"""
GitHub App Installation Token Cache

Holds, per GitSwarm organization, the most recent installation access token
and its expiry. A cached token is served only while it outlives the safety
margin; otherwise the organization is resolved again and the issuer is asked
for a fresh token.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from application.services.gitswarm.auth.token_issuer import (
    TokenIssuer,
    normalize_issued_token,
)
from application.services.gitswarm.models.types import CachedToken
from application.services.gitswarm.repository.resolver import OrgRepoResolver
from common.config.config import GITSWARM_TOKEN_SAFETY_MARGIN_SECONDS
from common.exception import NotFoundError, TokenIssuanceError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenStore:
    """Lock-guarded map of organization id to CachedToken.

    Entries are only ever replaced whole, so a reader sees either the old
    entry or the new one.
    """

    def __init__(self):
        self._entries: Dict[str, CachedToken] = {}
        self._lock = threading.Lock()

    def get(self, org_id: str) -> Optional[CachedToken]:
        with self._lock:
            return self._entries.get(org_id)

    def put(self, org_id: str, entry: CachedToken) -> None:
        with self._lock:
            self._entries[org_id] = entry

    def pop(self, org_id: str) -> Optional[CachedToken]:
        with self._lock:
            return self._entries.pop(org_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, org_id: object) -> bool:
        with self._lock:
            return org_id in self._entries


class InstallationTokenCache:
    """Caches installation access tokens keyed by GitSwarm organization id."""

    def __init__(
        self,
        resolver: OrgRepoResolver,
        issuer: TokenIssuer,
        clock: Optional[Clock] = None,
        safety_margin_seconds: Optional[int] = None,
        store: Optional[TokenStore] = None,
    ):
        """
        Initialize installation token cache.

        Args:
            resolver: Resolves organizations to their installation id
            issuer: Issues fresh installation tokens
            clock: Returns the current aware datetime (defaults to UTC now)
            safety_margin_seconds: Minimum remaining lifetime for a cached
                token to be served (defaults to config, 60s)
            store: Backing token store (creates new if not provided)
        """
        self.resolver = resolver
        self.issuer = issuer
        self.clock = clock or utc_now
        self.safety_margin_seconds = (
            safety_margin_seconds
            if safety_margin_seconds is not None
            else GITSWARM_TOKEN_SAFETY_MARGIN_SECONDS
        )
        self._store = store or TokenStore()

    @property
    def store(self) -> TokenStore:
        return self._store

    async def get_token(self, org_id: str) -> str:
        """
        Get an installation access token for a GitSwarm organization.

        Uses the cached token if it outlives the safety margin, otherwise
        resolves the organization and requests a new token.

        Args:
            org_id: GitSwarm organization UUID

        Returns:
            Installation access token

        Raises:
            NotFoundError: If the organization does not exist or has no installation
            InactiveOrganizationError: If the organization is not active
            TokenIssuanceError: If the issuer fails
        """
        cached = self._store.get(org_id)
        if cached and cached.is_usable(self.clock(), self.safety_margin_seconds):
            logger.debug(f"Using cached installation token for org {org_id}")
            return cached.token

        org = await self.resolver.resolve_organization(org_id)
        if org.installation_id is None:
            logger.warning(f"GitSwarm org {org_id} has no GitHub App installation")
            raise NotFoundError(f"GitSwarm org has no GitHub installation: {org_id}")

        logger.info(
            f"Requesting new installation token for org {org_id} "
            f"(installation {org.installation_id})"
        )
        try:
            result = await self.issuer.get_installation_token(org.installation_id)
        except TokenIssuanceError:
            raise
        except Exception as e:
            logger.error(
                f"Token issuer failed for installation {org.installation_id}: {e}"
            )
            raise TokenIssuanceError(
                f"Failed to get installation token: {e}",
                installation_id=org.installation_id,
            ) from e

        issued = normalize_issued_token(result)
        if issued.expires_at is None:
            logger.warning(
                f"Installation token for org {org_id} has no expiry; "
                f"it will be refreshed on next use"
            )
        self._store.put(org_id, CachedToken(token=issued.token, expires_at=issued.expires_at))
        return issued.token

    def clear(self, org_id: str) -> None:
        """Drop the cached token for one organization."""
        if self._store.pop(org_id) is not None:
            logger.info(f"Cleared cached installation token for org {org_id}")

    def clear_all(self) -> None:
        """Drop every cached token."""
        self._store.clear()
        logger.info("Cleared all cached installation tokens")
