"""
GitHub repository git-data operations: trees, commits, branches and refs.
"""

import logging
from typing import Any, Dict, List

from application.services.gitswarm.api.client import GitHubAPIClient, quote_path
from application.services.gitswarm.models.types import (
    BranchInfo,
    CommitInfo,
    CommitQuery,
    Tree,
)

logger = logging.getLogger(__name__)


class RepositoryOperations:
    """Handles GitHub repository tree, commit and branch operations."""

    def __init__(self, client: GitHubAPIClient):
        """Initialize repository operations.

        Args:
            client: GitHub API client
        """
        self.client = client

    async def get_tree(
        self,
        token: str,
        full_name: str,
        ref: str,
        recursive: bool = True,
    ) -> Tree:
        """Get the git tree for a ref.

        Args:
            token: Installation access token
            full_name: Repository slug (owner/name)
            ref: Branch name, tag or tree/commit SHA
            recursive: Include every nested entry

        Returns:
            Tree; ``truncated`` is set when GitHub cut the listing short
        """
        params = {"recursive": "1"} if recursive else None
        response = await self.client.get(
            f"repos/{full_name}/git/trees/{quote_path(ref)}", token, params=params
        )
        tree = Tree.from_api(response)
        if tree.truncated:
            logger.warning(f"Tree listing for {full_name}@{ref} was truncated by GitHub")
        return tree

    async def get_commits(
        self,
        token: str,
        full_name: str,
        query: CommitQuery,
    ) -> List[CommitInfo]:
        """List commits filtered by branch, path and date window."""
        params = {
            "sha": query.sha,
            "path": query.path,
            "since": query.since,
            "until": query.until,
            "per_page": query.per_page,
        }
        response = await self.client.get(f"repos/{full_name}/commits", token, params=params)
        return [CommitInfo.from_api(commit) for commit in response or []]

    async def get_branches(self, token: str, full_name: str) -> List[BranchInfo]:
        """List branches."""
        response = await self.client.get(f"repos/{full_name}/branches", token)
        return [BranchInfo.from_api(branch) for branch in response or []]

    async def create_branch(
        self,
        token: str,
        full_name: str,
        branch_name: str,
        from_sha: str,
    ) -> Dict[str, Any]:
        """Create ``refs/heads/<branch_name>`` pointing at from_sha.

        Returns:
            GitHub's ref payload
        """
        body = {"ref": f"refs/heads/{branch_name}", "sha": from_sha}
        response = await self.client.post(f"repos/{full_name}/git/refs", token, data=body)
        logger.info(f"Created branch {branch_name} on {full_name} at {from_sha}")
        return response
