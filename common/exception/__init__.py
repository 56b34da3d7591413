"""
GitSwarm exception hierarchy.

Every failure raised by the GitSwarm GitHub integration derives from
GitSwarmError so callers can catch the whole family at a single seam:

- NotFoundError: repository, organization or remote path does not exist
- InactiveOrganizationError: organization exists but is not active
- TokenIssuanceError: the installation token issuer failed
- UpstreamError: GitHub answered with a non-2xx status or was unreachable
"""

from typing import Optional


class GitSwarmError(Exception):
    """Base class for GitSwarm integration errors."""

    pass


class NotFoundError(GitSwarmError):
    """Raised when a repository, organization or remote path does not exist."""

    pass


class InactiveOrganizationError(GitSwarmError):
    """Raised when an organization exists but its status is not active."""

    def __init__(self, org_id: str, status: Optional[str] = None):
        self.org_id = org_id
        self.status = status
        super().__init__(f"GitSwarm org is not active: {org_id} (status: {status})")


class TokenIssuanceError(GitSwarmError):
    """Raised when an installation access token could not be issued."""

    def __init__(
        self,
        message: str,
        installation_id: Optional[int] = None,
        status_code: Optional[int] = None,
    ):
        self.installation_id = installation_id
        self.status_code = status_code
        super().__init__(message)


class UpstreamError(GitSwarmError):
    """Raised when GitHub returns a non-2xx response or cannot be reached.

    Attributes:
        status_code: HTTP status returned by GitHub, None for transport failures
        upstream_message: ``message`` field of the GitHub error body, or raw text
    """

    def __init__(self, status_code: Optional[int], upstream_message: str = ""):
        self.status_code = status_code
        self.upstream_message = upstream_message
        if status_code is None:
            text = f"GitHub API request error: {upstream_message}"
        else:
            text = f"GitHub API error: {status_code} - {upstream_message}"
        super().__init__(text)


def is_not_found(error: BaseException) -> bool:
    """Check whether an exception represents a not-found condition."""
    if isinstance(error, NotFoundError):
        return True
    return isinstance(error, UpstreamError) and error.status_code == 404


__all__ = [
    "GitSwarmError",
    "NotFoundError",
    "InactiveOrganizationError",
    "TokenIssuanceError",
    "UpstreamError",
    "is_not_found",
]
