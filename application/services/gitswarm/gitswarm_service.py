"""
GitSwarm Service - facade for GitHub operations on GitSwarm repositories.

Every repository operation follows the same path:
1. resolve the GitSwarm repository (slug, organization, default branch)
2. get an installation token for the owning organization (cached per org)
3. call the GitHub API with that token
4. return the normalized result, or let the typed error propagate

Nothing here retries or swallows errors.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from application.services.gitswarm.api.client import GitHubAPIClient
from application.services.gitswarm.api.contents import ContentsOperations
from application.services.gitswarm.api.pulls import PullRequestOperations
from application.services.gitswarm.api.repositories import RepositoryOperations
from application.services.gitswarm.auth.installation_token_cache import (
    Clock,
    InstallationTokenCache,
)
from application.services.gitswarm.auth.token_issuer import TokenIssuer
from application.services.gitswarm.models.types import (
    BranchInfo,
    CloneAccess,
    CommitAuthor,
    CommitInfo,
    CommitQuery,
    DirectoryEntry,
    FileContent,
    MergeOptions,
    PullRequestCreate,
    PullRequestInfo,
    PullRequestQuery,
    RepositoryRecord,
    Tree,
)
from application.services.gitswarm.repository.resolver import OrgRepoResolver
from common.config.config import GITHUB_HOST

logger = logging.getLogger(__name__)


class GitSwarmService:
    """
    Unified GitSwarm service for GitHub access on behalf of organizations.

    Collaborators are injected; build one instance per process (see
    ``get_gitswarm_service``) and share it.
    """

    def __init__(
        self,
        resolver: OrgRepoResolver,
        token_cache: Optional[InstallationTokenCache] = None,
        issuer: Optional[TokenIssuer] = None,
        api_client: Optional[GitHubAPIClient] = None,
        clock: Optional[Clock] = None,
        github_host: Optional[str] = None,
    ):
        """Initialize GitSwarm service.

        Args:
            resolver: Resolves repositories and organizations
            token_cache: Installation token cache (built from issuer if omitted)
            issuer: Token issuer, required when token_cache is omitted
            api_client: GitHub API client (creates new if not provided)
            clock: Clock for the token cache built from issuer
            github_host: Host used in clone URLs (defaults to config)

        Raises:
            ValueError: If neither token_cache nor issuer is provided
        """
        if token_cache is None:
            if issuer is None:
                raise ValueError("Either token_cache or issuer is required")
            token_cache = InstallationTokenCache(resolver, issuer, clock=clock)

        self.resolver = resolver
        self.token_cache = token_cache
        self.api_client = api_client or GitHubAPIClient()
        self.github_host = github_host or GITHUB_HOST

        self.contents = ContentsOperations(client=self.api_client)
        self.repositories = RepositoryOperations(client=self.api_client)
        self.pulls = PullRequestOperations(client=self.api_client)

    async def _resolve(self, repo_id: str) -> Tuple[RepositoryRecord, str]:
        repo = await self.resolver.resolve_repository(repo_id)
        token = await self.token_cache.get_token(repo.org_id)
        return repo, token

    # Tokens

    async def get_installation_token(self, org_id: str) -> str:
        """Get an installation access token for a GitSwarm organization.

        Args:
            org_id: GitSwarm organization UUID

        Returns:
            Installation access token
        """
        return await self.token_cache.get_token(org_id)

    async def get_token_for_repo(self, repo_id: str) -> str:
        """Get an installation access token for the organization owning a repository.

        Args:
            repo_id: GitSwarm repository UUID

        Returns:
            Installation access token
        """
        _, token = await self._resolve(repo_id)
        return token

    async def get_repo_with_clone_access(self, repo_id: str) -> CloneAccess:
        """Get repository details with a token-authenticated clone URL.

        The clone URL embeds a live credential valid as long as the cached
        installation token. Do not log or persist it.

        Args:
            repo_id: GitSwarm repository UUID

        Returns:
            CloneAccess
        """
        repo, org = await self.resolver.resolve_clone_target(repo_id)
        token = await self.token_cache.get_token(repo.org_id)
        clone_url = (
            f"https://x-access-token:{token}@{self.github_host}/"
            f"{repo.github_full_name}.git"
        )
        return CloneAccess(
            repository=repo,
            github_org_name=org.github_org_name,
            installation_id=org.installation_id,
            clone_url=clone_url,
            token=token,
        )

    def clear_token_cache(self, org_id: str) -> None:
        """Clear the cached installation token for one organization."""
        self.token_cache.clear(org_id)

    def clear_all_token_cache(self) -> None:
        """Clear every cached installation token."""
        self.token_cache.clear_all()

    # Reads

    async def get_file_contents(
        self, repo_id: str, path: str, ref: Optional[str] = None
    ) -> FileContent:
        """Get a file's decoded content.

        Args:
            repo_id: GitSwarm repository UUID
            path: File path in the repository
            ref: Branch/tag/commit (defaults to the repository's default branch)

        Returns:
            FileContent

        Raises:
            NotFoundError: If the repository or file does not exist
        """
        repo, token = await self._resolve(repo_id)
        return await self.contents.get_file_contents(
            token, repo.github_full_name, path, ref or repo.default_branch
        )

    async def get_directory_contents(
        self, repo_id: str, path: str = "", ref: Optional[str] = None
    ) -> List[DirectoryEntry]:
        """List a directory; a file path yields a one-element list."""
        repo, token = await self._resolve(repo_id)
        return await self.contents.get_directory_contents(
            token, repo.github_full_name, path, ref or repo.default_branch
        )

    async def get_tree(
        self, repo_id: str, ref: Optional[str] = None, recursive: bool = True
    ) -> Tree:
        """Get the repository tree, recursively by default."""
        repo, token = await self._resolve(repo_id)
        return await self.repositories.get_tree(
            token, repo.github_full_name, ref or repo.default_branch, recursive
        )

    async def get_commits(
        self, repo_id: str, query: Optional[CommitQuery] = None
    ) -> List[CommitInfo]:
        """List commits; the branch defaults to the repository's default branch.

        Args:
            repo_id: GitSwarm repository UUID
            query: Branch/path/date filters and page size

        Returns:
            List of CommitInfo
        """
        query = query or CommitQuery()
        repo, token = await self._resolve(repo_id)
        query = query.model_copy(update={"sha": query.sha or repo.default_branch})
        return await self.repositories.get_commits(token, repo.github_full_name, query)

    async def get_branches(self, repo_id: str) -> List[BranchInfo]:
        repo, token = await self._resolve(repo_id)
        return await self.repositories.get_branches(token, repo.github_full_name)

    async def get_pull_requests(
        self, repo_id: str, query: Optional[PullRequestQuery] = None
    ) -> List[PullRequestInfo]:
        """List pull requests (open, newest first, 30 per page by default)."""
        repo, token = await self._resolve(repo_id)
        return await self.pulls.get_pull_requests(
            token, repo.github_full_name, query or PullRequestQuery()
        )

    async def get_pull_request(self, repo_id: str, pr_number: int) -> PullRequestInfo:
        repo, token = await self._resolve(repo_id)
        return await self.pulls.get_pull_request(token, repo.github_full_name, pr_number)

    # Writes

    async def create_file(
        self,
        repo_id: str,
        path: str,
        content: str,
        message: str,
        author: CommitAuthor,
        branch: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a file, committing as the given author.

        Args:
            repo_id: GitSwarm repository UUID
            path: File path in the repository
            content: Text content (base64-encoded before sending)
            message: Commit message
            author: Commit author identity
            branch: Target branch (defaults to the repository's default branch)

        Returns:
            GitHub's commit and content payload
        """
        repo, token = await self._resolve(repo_id)
        return await self.contents.create_file(
            token,
            repo.github_full_name,
            path,
            content,
            message,
            branch or repo.default_branch,
            author,
        )

    async def update_file(
        self,
        repo_id: str,
        path: str,
        content: str,
        message: str,
        sha: str,
        author: CommitAuthor,
        branch: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Update a file, committing as the given author.

        Args:
            sha: Current blob SHA of the file; required so a concurrent
                change is rejected by GitHub instead of overwritten

        Raises:
            ValueError: If sha is missing, before anything is resolved or sent
            UpstreamError: If GitHub rejects the update (e.g. stale sha)
        """
        if not sha:
            raise ValueError(f"Current blob sha is required to update {path}")
        repo, token = await self._resolve(repo_id)
        return await self.contents.update_file(
            token,
            repo.github_full_name,
            path,
            content,
            message,
            sha,
            branch or repo.default_branch,
            author,
        )

    async def delete_file(
        self,
        repo_id: str,
        path: str,
        message: str,
        sha: str,
        author: CommitAuthor,
        branch: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Delete a file, committing as the given author. sha is required."""
        if not sha:
            raise ValueError(f"Current blob sha is required to delete {path}")
        repo, token = await self._resolve(repo_id)
        return await self.contents.delete_file(
            token,
            repo.github_full_name,
            path,
            message,
            sha,
            branch or repo.default_branch,
            author,
        )

    async def create_branch(
        self, repo_id: str, branch_name: str, from_sha: str
    ) -> Dict[str, Any]:
        """Create a branch pointing at from_sha."""
        repo, token = await self._resolve(repo_id)
        return await self.repositories.create_branch(
            token, repo.github_full_name, branch_name, from_sha
        )

    async def create_pull_request(
        self, repo_id: str, data: PullRequestCreate
    ) -> Dict[str, Any]:
        """Open a pull request; base defaults to the repository's default branch."""
        repo, token = await self._resolve(repo_id)
        return await self.pulls.create_pull_request(
            token, repo.github_full_name, data, repo.default_branch
        )

    async def merge_pull_request(
        self,
        repo_id: str,
        pr_number: int,
        options: Optional[MergeOptions] = None,
    ) -> Dict[str, Any]:
        """Merge a pull request (squash by default)."""
        repo, token = await self._resolve(repo_id)
        return await self.pulls.merge_pull_request(
            token, repo.github_full_name, pr_number, options or MergeOptions()
        )

    async def close_pull_request(self, repo_id: str, pr_number: int) -> Dict[str, Any]:
        repo, token = await self._resolve(repo_id)
        return await self.pulls.close_pull_request(token, repo.github_full_name, pr_number)

    async def add_pull_request_comment(
        self, repo_id: str, pr_number: int, body: str
    ) -> Dict[str, Any]:
        repo, token = await self._resolve(repo_id)
        return await self.pulls.add_pull_request_comment(
            token, repo.github_full_name, pr_number, body
        )
