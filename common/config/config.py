"""
GitSwarm configuration module.

Values are read once from the environment (and a local .env file, if present).
Every component also accepts explicit arguments, so these constants are only
defaults.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def get_int_env(key: str, default: int) -> int:
    """Get an integer environment variable, falling back to default when unset."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}") from None


# GitHub API
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_HOST = os.getenv("GITHUB_HOST", "github.com")
GITHUB_API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")

# GitHub App credentials used to issue installation tokens
GITHUB_APP_ID = os.getenv("GITHUB_APP_ID")
GITHUB_APP_PRIVATE_KEY_PATH = os.getenv("GITHUB_APP_PRIVATE_KEY_PATH")
GITHUB_APP_PRIVATE_KEY_CONTENT = os.getenv("GITHUB_APP_PRIVATE_KEY_CONTENT")

# Installation token cache
GITSWARM_TOKEN_SAFETY_MARGIN_SECONDS = get_int_env(
    "GITSWARM_TOKEN_SAFETY_MARGIN_SECONDS", 60
)

# Upper bound for every GitHub HTTP call
GITSWARM_HTTP_TIMEOUT_SECONDS = get_int_env("GITSWARM_HTTP_TIMEOUT_SECONDS", 30)
