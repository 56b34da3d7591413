"""
GitHub API Module

Handles the GitHub REST API interactions GitSwarm supports:
- Repository contents (read, create, update, delete files)
- Trees, commits, branches and refs
- Pull requests
"""

from application.services.gitswarm.api.client import GitHubAPIClient
from application.services.gitswarm.api.contents import ContentsOperations
from application.services.gitswarm.api.pulls import PullRequestOperations
from application.services.gitswarm.api.repositories import RepositoryOperations

__all__ = [
    "GitHubAPIClient",
    "ContentsOperations",
    "PullRequestOperations",
    "RepositoryOperations",
]
