"""
GitHub pull request operations.
"""

import logging
from typing import Any, Dict, List

from application.services.gitswarm.api.client import GitHubAPIClient
from application.services.gitswarm.models.types import (
    MergeOptions,
    PullRequestCreate,
    PullRequestInfo,
    PullRequestQuery,
)
from common.exception import NotFoundError, UpstreamError, is_not_found

logger = logging.getLogger(__name__)


class PullRequestOperations:
    """Handles GitHub pull request operations."""

    def __init__(self, client: GitHubAPIClient):
        """Initialize pull request operations.

        Args:
            client: GitHub API client
        """
        self.client = client

    async def get_pull_requests(
        self,
        token: str,
        full_name: str,
        query: PullRequestQuery,
    ) -> List[PullRequestInfo]:
        """List pull requests.

        Args:
            token: Installation access token
            full_name: Repository slug (owner/name)
            query: State, sort order and page size

        Returns:
            List of PullRequestInfo
        """
        params = {
            "state": query.state,
            "sort": query.sort,
            "direction": query.direction,
            "per_page": query.per_page,
        }
        response = await self.client.get(f"repos/{full_name}/pulls", token, params=params)
        return [PullRequestInfo.from_api(pr) for pr in response or []]

    async def get_pull_request(
        self, token: str, full_name: str, number: int
    ) -> PullRequestInfo:
        """Get a single pull request.

        Raises:
            NotFoundError: If the pull request does not exist
        """
        try:
            response = await self.client.get(f"repos/{full_name}/pulls/{number}", token)
        except UpstreamError as e:
            if is_not_found(e):
                raise NotFoundError(f"Pull request not found: #{number}") from e
            raise
        return PullRequestInfo.from_api(response)

    async def create_pull_request(
        self,
        token: str,
        full_name: str,
        data: PullRequestCreate,
        base: str,
    ) -> Dict[str, Any]:
        """Open a pull request.

        Args:
            token: Installation access token
            full_name: Repository slug (owner/name)
            data: Title, body, head branch and draft flag
            base: Target branch, used when data.base is unset

        Returns:
            GitHub's pull request payload
        """
        body = {
            "title": data.title,
            "body": data.body,
            "head": data.head,
            "base": data.base or base,
            "draft": data.draft,
        }
        response = await self.client.post(f"repos/{full_name}/pulls", token, data=body)
        logger.info(f"Opened pull request {data.head} -> {body['base']} on {full_name}")
        return response

    async def merge_pull_request(
        self,
        token: str,
        full_name: str,
        number: int,
        options: MergeOptions,
    ) -> Dict[str, Any]:
        """Merge a pull request.

        Returns:
            GitHub's merge payload (sha, merged, message)
        """
        body: Dict[str, Any] = {"merge_method": options.merge_method}
        if options.commit_title:
            body["commit_title"] = options.commit_title
        if options.commit_message:
            body["commit_message"] = options.commit_message

        response = await self.client.put(
            f"repos/{full_name}/pulls/{number}/merge", token, data=body
        )
        logger.info(f"Merged pull request #{number} on {full_name} ({options.merge_method})")
        return response

    async def close_pull_request(
        self, token: str, full_name: str, number: int
    ) -> Dict[str, Any]:
        """Close a pull request without merging."""
        response = await self.client.patch(
            f"repos/{full_name}/pulls/{number}", token, data={"state": "closed"}
        )
        logger.info(f"Closed pull request #{number} on {full_name}")
        return response

    async def add_pull_request_comment(
        self, token: str, full_name: str, number: int, body: str
    ) -> Dict[str, Any]:
        # PR conversation comments live on the issues endpoint
        return await self.client.post(
            f"repos/{full_name}/issues/{number}/comments", token, data={"body": body}
        )
