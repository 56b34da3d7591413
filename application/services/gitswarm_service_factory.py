"""
GitSwarm Service Factory

Creates GitSwarmService instances wired from environment configuration:
GitHub App credentials for token issuance, API base URL and timeouts, and the
token safety margin.
"""

import logging
from typing import Optional

import httpx

from application.services.gitswarm.api.client import GitHubAPIClient
from application.services.gitswarm.auth.installation_token_cache import (
    InstallationTokenCache,
)
from application.services.gitswarm.auth.jwt_generator import GitHubAppJWTGenerator
from application.services.gitswarm.auth.token_issuer import (
    GitHubAppTokenIssuer,
    TokenIssuer,
)
from application.services.gitswarm.gitswarm_service import GitSwarmService
from application.services.gitswarm.repository.resolver import (
    MetadataQuery,
    OrgRepoResolver,
)
from common.config.config import (
    GITHUB_API_URL,
    GITHUB_APP_ID,
    GITHUB_HOST,
    GITSWARM_HTTP_TIMEOUT_SECONDS,
    GITSWARM_TOKEN_SAFETY_MARGIN_SECONDS,
)

logger = logging.getLogger(__name__)


class GitSwarmServiceFactory:
    """Factory for creating GitSwarmService instances."""

    @staticmethod
    def create(
        db: MetadataQuery,
        issuer: Optional[TokenIssuer] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> GitSwarmService:
        """
        Create a GitSwarmService backed by the given metadata store.

        Uses GitHub App configuration from environment variables unless an
        issuer is supplied:
        - GITHUB_APP_ID
        - GITHUB_APP_PRIVATE_KEY_CONTENT or GITHUB_APP_PRIVATE_KEY_PATH

        Args:
            db: Query collaborator for gitswarm_orgs / gitswarm_repos
            issuer: Token issuer (defaults to the GitHub App issuer)
            http_client: Shared httpx client for GitHub API calls

        Returns:
            GitSwarmService

        Raises:
            ValueError: If GitHub App configuration is missing and no issuer is given
        """
        if issuer is None:
            issuer = GitHubAppTokenIssuer(jwt_generator=GitHubAppJWTGenerator())
            logger.info(f"Creating GitSwarm service with GitHub App {GITHUB_APP_ID}")

        resolver = OrgRepoResolver(db)
        token_cache = InstallationTokenCache(
            resolver,
            issuer,
            safety_margin_seconds=GITSWARM_TOKEN_SAFETY_MARGIN_SECONDS,
        )
        api_client = GitHubAPIClient(
            base_url=GITHUB_API_URL,
            timeout=GITSWARM_HTTP_TIMEOUT_SECONDS,
            http_client=http_client,
        )
        return GitSwarmService(
            resolver,
            token_cache=token_cache,
            api_client=api_client,
            github_host=GITHUB_HOST,
        )


def get_gitswarm_service(
    db: MetadataQuery, issuer: Optional[TokenIssuer] = None
) -> GitSwarmService:
    """
    Convenience function to get a GitSwarmService.

    Args:
        db: Query collaborator for gitswarm_orgs / gitswarm_repos
        issuer: Optional token issuer override

    Returns:
        GitSwarmService instance
    """
    return GitSwarmServiceFactory.create(db, issuer=issuer)
