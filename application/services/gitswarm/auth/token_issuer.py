"""
Installation token issuers.

A token issuer turns a GitHub App installation id into a fresh installation
access token. The cache only depends on the TokenIssuer interface; the
GitHub App implementation below is the one used in production.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

import httpx

from application.services.gitswarm.auth.jwt_generator import GitHubAppJWTGenerator
from application.services.gitswarm.models.types import IssuedToken
from common.config.config import (
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITSWARM_HTTP_TIMEOUT_SECONDS,
)
from common.exception import TokenIssuanceError

logger = logging.getLogger(__name__)

IssuerResult = Union[str, Mapping[str, Any], IssuedToken]


class TokenIssuer(ABC):
    """Issues installation access tokens for GitHub App installations."""

    @abstractmethod
    async def get_installation_token(self, installation_id: int) -> IssuerResult:
        """
        Get a fresh installation access token.

        Args:
            installation_id: GitHub App installation ID

        Returns:
            A bare token string, a mapping with ``token`` and ``expires_at``,
            or an IssuedToken
        """
        pass


def parse_expiry(value: Any) -> Optional[datetime]:
    """Parse an expiry timestamp into an aware UTC datetime.

    Accepts datetimes and ISO 8601 strings (``Z`` suffix included). Returns None
    for missing or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        expires_at = value
    else:
        try:
            expires_at = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Failed to parse token expiration: {value!r}")
            return None
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at


def normalize_issued_token(result: IssuerResult) -> IssuedToken:
    """
    Normalize whatever an issuer returned into an IssuedToken.

    Raises:
        TokenIssuanceError: If no token can be extracted
    """
    if isinstance(result, IssuedToken):
        token, expires_at = result.token, parse_expiry(result.expires_at)
    elif isinstance(result, str):
        token, expires_at = result, None
    elif isinstance(result, Mapping):
        token, expires_at = result.get("token"), parse_expiry(result.get("expires_at"))
    else:
        raise TokenIssuanceError(
            f"Token issuer returned unsupported type: {type(result).__name__}"
        )

    if not token or not isinstance(token, str):
        raise TokenIssuanceError("Token issuer returned an empty token")
    return IssuedToken(token=token, expires_at=expires_at)


class GitHubAppTokenIssuer(TokenIssuer):
    """Issues installation tokens by authenticating as the GitHub App."""

    def __init__(
        self,
        jwt_generator: Optional[GitHubAppJWTGenerator] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize GitHub App token issuer.

        Args:
            jwt_generator: JWT generator instance (creates new if not provided)
            base_url: GitHub API base URL (defaults to config)
            api_version: GitHub API version header value (defaults to config)
            timeout: Request timeout in seconds (defaults to config)
        """
        self.jwt_generator = jwt_generator or GitHubAppJWTGenerator()
        self.base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self.api_version = api_version or GITHUB_API_VERSION
        self.timeout = timeout if timeout is not None else GITSWARM_HTTP_TIMEOUT_SECONDS

    async def get_installation_token(self, installation_id: int) -> IssuedToken:
        """
        Request a new installation access token from the GitHub API.

        Args:
            installation_id: GitHub App installation ID

        Returns:
            IssuedToken with token and expiry

        Raises:
            TokenIssuanceError: If GitHub rejects the request or is unreachable
        """
        jwt_token = self.jwt_generator.generate_jwt()

        url = f"{self.base_url}/app/installations/{installation_id}/access_tokens"
        headers = {
            "Authorization": f"Bearer {jwt_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
        }

        try:
            timeout_config = httpx.Timeout(self.timeout, connect=10.0)
            async with httpx.AsyncClient(timeout=timeout_config, trust_env=False) as client:
                response = await client.post(url, headers=headers)
        except httpx.RequestError as e:
            error_msg = f"Network error requesting installation token: {e}"
            logger.error(error_msg)
            raise TokenIssuanceError(error_msg, installation_id=installation_id) from e

        if response.status_code != 201:
            error_msg = (
                f"Failed to get installation token for installation {installation_id} "
                f"(status {response.status_code}): {response.text}"
            )
            logger.error(error_msg)
            raise TokenIssuanceError(
                error_msg,
                installation_id=installation_id,
                status_code=response.status_code,
            )

        data = response.json()
        issued = normalize_issued_token(data)
        logger.info(
            f"Obtained installation token for installation {installation_id} "
            f"(expires at {issued.expires_at})"
        )
        return issued
