"""
GitHub App JWT Generator

Signs the short-lived RS256 tokens that authenticate GitSwarm as its GitHub App.
JWTs are exchanged for installation access tokens.
"""

import logging
import time
from pathlib import Path
from typing import Optional

import jwt

from common.config.config import (
    GITHUB_APP_ID,
    GITHUB_APP_PRIVATE_KEY_CONTENT,
    GITHUB_APP_PRIVATE_KEY_PATH,
)

logger = logging.getLogger(__name__)

# GitHub rejects app JWTs valid for longer than 10 minutes
MAX_JWT_LIFETIME_SECONDS = 600
# iat is backdated to tolerate clock drift between us and GitHub
CLOCK_DRIFT_SECONDS = 60


class GitHubAppJWTGenerator:
    """Signs app JWTs with the GitHub App private key."""

    def __init__(
        self,
        app_id: Optional[str] = None,
        private_key: Optional[str] = None,
        private_key_path: Optional[str] = None,
    ):
        """
        Configure the app identity and key source.

        Args:
            app_id: GitHub App ID (defaults to config)
            private_key: PEM private key content (defaults to config)
            private_key_path: Path to private key .pem file (defaults to config)

        Raises:
            ValueError: If the app id or private key source is missing
        """
        self.app_id = app_id or GITHUB_APP_ID
        self.private_key_path = private_key_path or GITHUB_APP_PRIVATE_KEY_PATH
        self._private_key = private_key or GITHUB_APP_PRIVATE_KEY_CONTENT

        if not self.app_id:
            raise ValueError(
                "GitHub App ID is required. Set GITHUB_APP_ID in environment."
            )

        if not self._private_key and not self.private_key_path:
            raise ValueError(
                "GitHub App private key is required. Set GITHUB_APP_PRIVATE_KEY_CONTENT "
                "or GITHUB_APP_PRIVATE_KEY_PATH in environment."
            )

    def _load_private_key(self) -> str:
        """
        Return the PEM key, reading the configured file on first use.

        Returns:
            PEM private key

        Raises:
            FileNotFoundError: If private key file doesn't exist
            ValueError: If private key is empty
        """
        if self._private_key:
            return self._private_key

        key_path = Path(self.private_key_path)
        if not key_path.exists():
            raise FileNotFoundError(f"GitHub App private key not found at: {key_path}")

        with open(key_path, "r") as key_file:
            private_key = key_file.read()

        if not private_key.strip():
            raise ValueError(f"GitHub App private key file is empty: {key_path}")

        logger.info(f"Loaded GitHub App private key from {key_path}")
        self._private_key = private_key
        return self._private_key

    def generate_jwt(self, expiration_seconds: int = MAX_JWT_LIFETIME_SECONDS) -> str:
        """
        Sign an app JWT for the installation token endpoint.

        GitHub requires:
        - Algorithm: RS256
        - Issued at (iat): not in the future
        - Expiration (exp): Max 10 minutes from now
        - Issuer (iss): GitHub App ID

        Args:
            expiration_seconds: Token lifetime in seconds (capped at 600)

        Returns:
            Encoded JWT

        Raises:
            ValueError: If expiration is invalid or signing fails
        """
        if expiration_seconds < 1:
            raise ValueError("Expiration must be at least 1 second")
        expiration_seconds = min(expiration_seconds, MAX_JWT_LIFETIME_SECONDS)

        private_key = self._load_private_key()
        now = int(time.time())
        payload = {
            "iat": now - CLOCK_DRIFT_SECONDS,
            "exp": now + expiration_seconds,
            "iss": str(self.app_id),
        }

        try:
            token = jwt.encode(payload, private_key, algorithm="RS256")
        except Exception as e:
            logger.error(f"Failed to generate GitHub App JWT: {e}")
            raise ValueError(f"Failed to generate GitHub App JWT: {e}") from e

        logger.debug(f"Generated GitHub App JWT (app_id={self.app_id})")
        return token
