"""
Organization and repository resolver.

Maps internal GitSwarm repository/organization UUIDs to the GitHub App
installation, the ``owner/name`` slug and the default branch. Metadata is read
fresh on every call; only installation tokens are cached, one layer up.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Sequence, Tuple

from application.services.gitswarm.models.types import (
    OrganizationRecord,
    RepositoryRecord,
)
from common.exception import InactiveOrganizationError, NotFoundError

logger = logging.getLogger(__name__)

REPOSITORY_QUERY = """
    SELECT id, org_id, github_full_name, default_branch
    FROM gitswarm_repos WHERE id = $1
"""

ORGANIZATION_QUERY = """
    SELECT id, status, github_installation_id, github_org_name
    FROM gitswarm_orgs WHERE id = $1
"""

CLONE_TARGET_QUERY = """
    SELECT
        r.id, r.org_id, r.github_full_name, r.default_branch,
        o.status, o.github_org_name, o.github_installation_id
    FROM gitswarm_repos r
    JOIN gitswarm_orgs o ON r.org_id = o.id
    WHERE r.id = $1
"""


class MetadataQuery(ABC):
    """Read-only query interface over the relational store."""

    @abstractmethod
    async def query(
        self, text: str, params: Sequence[Any] = ()
    ) -> List[Mapping[str, Any]]:
        """
        Run a parameterized query and return its rows.

        Args:
            text: SQL text with positional ``$n`` placeholders
            params: Positional parameters

        Returns:
            List of rows as mappings keyed by column name
        """
        pass


class OrgRepoResolver:
    """Resolves GitSwarm repositories and organizations from the metadata store."""

    def __init__(self, db: MetadataQuery):
        """
        Initialize resolver.

        Args:
            db: Query collaborator backed by the relational store
        """
        self.db = db

    async def resolve_repository(self, repo_id: str) -> RepositoryRecord:
        """
        Resolve a repository to its slug, organization and default branch.

        Args:
            repo_id: GitSwarm repository UUID

        Returns:
            RepositoryRecord

        Raises:
            NotFoundError: If the repository does not exist
        """
        row = await self._fetch_one(REPOSITORY_QUERY, repo_id)
        if row is None:
            logger.warning(f"GitSwarm repo not found: {repo_id}")
            raise NotFoundError(f"GitSwarm repo not found: {repo_id}")
        return self._to_repository(repo_id, row)

    async def resolve_organization(self, org_id: str) -> OrganizationRecord:
        """
        Resolve an organization to its GitHub App installation.

        Args:
            org_id: GitSwarm organization UUID

        Returns:
            OrganizationRecord for an active organization

        Raises:
            NotFoundError: If the organization does not exist
            InactiveOrganizationError: If the organization is not active
        """
        row = await self._fetch_one(ORGANIZATION_QUERY, org_id)
        if row is None:
            logger.warning(f"GitSwarm org not found: {org_id}")
            raise NotFoundError(f"GitSwarm org not found: {org_id}")

        org = OrganizationRecord(
            org_id=org_id,
            status=row.get("status"),
            installation_id=row.get("github_installation_id"),
            github_org_name=row.get("github_org_name"),
        )
        if not org.is_active:
            logger.warning(f"GitSwarm org {org_id} is not active (status: {org.status})")
            raise InactiveOrganizationError(org_id, org.status)
        return org

    async def resolve_clone_target(
        self, repo_id: str
    ) -> Tuple[RepositoryRecord, OrganizationRecord]:
        """
        Resolve a repository together with its owning organization in one read.

        The organization's status is not checked here; the token lookup that
        follows enforces it.

        Raises:
            NotFoundError: If the repository does not exist
        """
        row = await self._fetch_one(CLONE_TARGET_QUERY, repo_id)
        if row is None:
            logger.warning(f"GitSwarm repo not found: {repo_id}")
            raise NotFoundError(f"GitSwarm repo not found: {repo_id}")

        repository = self._to_repository(repo_id, row)
        org = OrganizationRecord(
            org_id=repository.org_id,
            status=row.get("status"),
            installation_id=row.get("github_installation_id"),
            github_org_name=row.get("github_org_name"),
        )
        return repository, org

    async def _fetch_one(self, text: str, key: str):
        rows = await self.db.query(text, [key])
        if not rows:
            return None
        return rows[0]

    @staticmethod
    def _to_repository(repo_id: str, row: Mapping[str, Any]) -> RepositoryRecord:
        full_name = row.get("github_full_name") or ""
        owner, _, name = full_name.partition("/")
        if not owner or not name:
            logger.error(f"GitSwarm repo {repo_id} has malformed slug: {full_name!r}")
            raise NotFoundError(
                f"GitSwarm repo {repo_id} is not linked to a GitHub repository "
                f"(slug: {full_name!r})"
            )
        return RepositoryRecord(
            repo_id=repo_id,
            org_id=row["org_id"],
            github_full_name=full_name,
            default_branch=row.get("default_branch") or "main",
        )
