"""
GitHub App Authentication Module

Handles GitHub App authentication including:
- JWT generation for the GitHub App
- Installation access token issuance
- Per-organization token caching and refresh
"""

from application.services.gitswarm.auth.installation_token_cache import (
    InstallationTokenCache,
    TokenStore,
)
from application.services.gitswarm.auth.jwt_generator import GitHubAppJWTGenerator
from application.services.gitswarm.auth.token_issuer import (
    GitHubAppTokenIssuer,
    TokenIssuer,
    normalize_issued_token,
)

__all__ = [
    "GitHubAppJWTGenerator",
    "GitHubAppTokenIssuer",
    "InstallationTokenCache",
    "TokenIssuer",
    "TokenStore",
    "normalize_issued_token",
]
