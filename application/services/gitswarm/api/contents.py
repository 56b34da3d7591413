"""
GitHub repository contents operations.

Reads files and directory listings, and writes files through the contents API.
File content is base64-encoded on the way out and decoded on the way in.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

from application.services.gitswarm.api.client import GitHubAPIClient, quote_path
from application.services.gitswarm.models.types import (
    CommitAuthor,
    DirectoryEntry,
    FileContent,
)
from common.exception import NotFoundError, UpstreamError, is_not_found

logger = logging.getLogger(__name__)


def encode_content(content: str) -> str:
    """Base64-encode text content for the contents API."""
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def _require_sha(sha: Optional[str], path: str) -> None:
    if not sha:
        raise ValueError(f"Current blob sha is required to modify {path}")


class ContentsOperations:
    """Handles GitHub repository contents operations."""

    def __init__(self, client: GitHubAPIClient):
        """Initialize contents operations.

        Args:
            client: GitHub API client
        """
        self.client = client

    @staticmethod
    def _contents_path(full_name: str, path: str = "") -> str:
        path = quote_path(path)
        if path:
            return f"repos/{full_name}/contents/{path}"
        return f"repos/{full_name}/contents"

    async def get_file_contents(
        self,
        token: str,
        full_name: str,
        path: str,
        ref: Optional[str] = None,
    ) -> FileContent:
        """Get a file with its content decoded to text.

        Args:
            token: Installation access token
            full_name: Repository slug (owner/name)
            path: Path to file
            ref: Git reference (branch, tag, commit SHA)

        Returns:
            FileContent

        Raises:
            NotFoundError: If GitHub reports 404 for the path
            UpstreamError: For any other failure
        """
        try:
            response = await self.client.get(
                self._contents_path(full_name, path), token, params={"ref": ref}
            )
        except UpstreamError as e:
            if is_not_found(e):
                raise NotFoundError(f"File not found: {path}") from e
            raise

        if isinstance(response, list):
            raise UpstreamError(400, f"Path is a directory, not a file: {path}")
        return FileContent.from_api(response)

    async def get_directory_contents(
        self,
        token: str,
        full_name: str,
        path: str = "",
        ref: Optional[str] = None,
    ) -> List[DirectoryEntry]:
        """List contents of a directory.

        A path that points at a single file yields a one-element list.

        Args:
            token: Installation access token
            full_name: Repository slug (owner/name)
            path: Path to directory (empty string for root)
            ref: Git reference (branch, tag, commit SHA)

        Returns:
            List of DirectoryEntry

        Raises:
            NotFoundError: If GitHub reports 404 for the path
            UpstreamError: For any other failure
        """
        try:
            response = await self.client.get(
                self._contents_path(full_name, path), token, params={"ref": ref}
            )
        except UpstreamError as e:
            if is_not_found(e):
                raise NotFoundError(f"Path not found: {path}") from e
            raise

        if isinstance(response, list):
            return [DirectoryEntry.from_api(item) for item in response]
        return [DirectoryEntry.from_api(response)]

    async def create_file(
        self,
        token: str,
        full_name: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        author: CommitAuthor,
    ) -> Dict[str, Any]:
        """Create a file on a branch.

        Returns:
            GitHub's commit and content payload
        """
        body = {
            "message": message,
            "content": encode_content(content),
            "branch": branch,
            "author": author.to_payload(),
        }
        response = await self.client.put(self._contents_path(full_name, path), token, data=body)
        logger.info(f"Created {path} on {full_name}@{branch}")
        return response

    async def update_file(
        self,
        token: str,
        full_name: str,
        path: str,
        content: str,
        message: str,
        sha: str,
        branch: str,
        author: CommitAuthor,
    ) -> Dict[str, Any]:
        """Update an existing file on a branch.

        Args:
            sha: Blob SHA of the file being replaced; GitHub rejects the
                update if the file changed since that SHA

        Returns:
            GitHub's commit and content payload

        Raises:
            ValueError: If sha is missing (raised before any request is made)
            UpstreamError: If GitHub rejects the update
        """
        _require_sha(sha, path)
        body = {
            "message": message,
            "content": encode_content(content),
            "sha": sha,
            "branch": branch,
            "author": author.to_payload(),
        }
        response = await self.client.put(self._contents_path(full_name, path), token, data=body)
        logger.info(f"Updated {path} on {full_name}@{branch}")
        return response

    async def delete_file(
        self,
        token: str,
        full_name: str,
        path: str,
        message: str,
        sha: str,
        branch: str,
        author: CommitAuthor,
    ) -> Dict[str, Any]:
        """Delete a file on a branch. sha is required, as for updates."""
        _require_sha(sha, path)
        body = {
            "message": message,
            "sha": sha,
            "branch": branch,
            "author": author.to_payload(),
        }
        response = await self.client.delete(
            self._contents_path(full_name, path), token, data=body
        )
        logger.info(f"Deleted {path} on {full_name}@{branch}")
        return response
