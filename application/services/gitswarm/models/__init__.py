"""
GitSwarm Models Module

Metadata records, token types, normalized GitHub entities and request options.
"""

from application.services.gitswarm.models.types import (
    ACTIVE_STATUS,
    BranchInfo,
    CachedToken,
    CloneAccess,
    CommitAuthor,
    CommitIdentity,
    CommitInfo,
    CommitQuery,
    DirectoryEntry,
    FileContent,
    GitRefInfo,
    IssuedToken,
    MergeOptions,
    OrganizationRecord,
    PullRequestCreate,
    PullRequestInfo,
    PullRequestQuery,
    RepositoryRecord,
    Tree,
    TreeEntry,
)

__all__ = [
    "ACTIVE_STATUS",
    "BranchInfo",
    "CachedToken",
    "CloneAccess",
    "CommitAuthor",
    "CommitIdentity",
    "CommitInfo",
    "CommitQuery",
    "DirectoryEntry",
    "FileContent",
    "GitRefInfo",
    "IssuedToken",
    "MergeOptions",
    "OrganizationRecord",
    "PullRequestCreate",
    "PullRequestInfo",
    "PullRequestQuery",
    "RepositoryRecord",
    "Tree",
    "TreeEntry",
]
