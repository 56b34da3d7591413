"""
Shared types and models for GitSwarm operations.

Records read from the metadata store and normalized projections of GitHub
payloads are frozen dataclasses. Structured request options are pydantic
models so defaults and bounds are validated before anything goes on the wire.
"""

import base64
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

ACTIVE_STATUS = "active"


# Metadata records


@dataclass(frozen=True)
class OrganizationRecord:
    org_id: str
    status: str
    installation_id: Optional[int]
    github_org_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS


@dataclass(frozen=True)
class RepositoryRecord:
    repo_id: str
    org_id: str
    github_full_name: str
    default_branch: str

    @property
    def owner(self) -> str:
        return self.github_full_name.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.github_full_name.split("/", 1)[1]


# Tokens


@dataclass(frozen=True)
class IssuedToken:
    """Installation token as returned by a token issuer."""

    token: str = field(repr=False)
    expires_at: Optional[datetime] = None


@dataclass(frozen=True)
class CachedToken:
    """Installation token held in the per-organization cache."""

    token: str = field(repr=False)
    expires_at: Optional[datetime] = None

    def is_usable(self, now: datetime, margin_seconds: int) -> bool:
        """Check whether the token outlives the safety margin.

        A token without a known expiry is never usable from cache.
        """
        if self.expires_at is None:
            return False
        return (self.expires_at - now).total_seconds() > margin_seconds


@dataclass(frozen=True)
class CloneAccess:
    """Repository metadata plus a live, token-authenticated clone URL.

    clone_url and token are credentials and are kept out of repr.
    """

    repository: RepositoryRecord
    github_org_name: Optional[str]
    installation_id: Optional[int]
    clone_url: str = field(repr=False)
    token: str = field(repr=False)


@dataclass(frozen=True)
class CommitAuthor:
    name: str
    email: str

    def to_payload(self) -> Dict[str, str]:
        return {"name": self.name, "email": self.email}


# Normalized GitHub entities


class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FileContent(_Serializable):
    """A file read as UTF-8 text; undecodable bytes become U+FFFD, so binary files are lossy."""

    content: Optional[str]
    sha: str
    encoding: Optional[str]
    size: int
    path: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FileContent":
        content = data.get("content")
        encoding = data.get("encoding")
        if content is not None and encoding == "base64":
            content = base64.b64decode(content).decode("utf-8", errors="replace")
        return cls(
            content=content,
            sha=data.get("sha", ""),
            encoding=encoding,
            size=data.get("size", 0),
            path=data.get("path", ""),
        )


@dataclass(frozen=True)
class DirectoryEntry(_Serializable):
    name: str
    path: str
    type: str  # "file", "dir", "symlink" or "submodule"
    sha: str
    size: int

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DirectoryEntry":
        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            type=data.get("type", ""),
            sha=data.get("sha", ""),
            size=data.get("size", 0),
        )


@dataclass(frozen=True)
class TreeEntry(_Serializable):
    path: str
    type: str
    sha: str
    size: Optional[int]  # GitHub omits size for trees
    mode: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TreeEntry":
        return cls(
            path=data.get("path", ""),
            type=data.get("type", ""),
            sha=data.get("sha", ""),
            size=data.get("size"),
            mode=data.get("mode", ""),
        )


@dataclass(frozen=True)
class Tree(_Serializable):
    sha: str
    truncated: bool
    tree: List[TreeEntry]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Tree":
        return cls(
            sha=data.get("sha", ""),
            truncated=bool(data.get("truncated", False)),
            tree=[TreeEntry.from_api(item) for item in data.get("tree") or []],
        )


@dataclass(frozen=True)
class CommitIdentity(_Serializable):
    name: Optional[str]
    email: Optional[str]
    date: Optional[str]

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "CommitIdentity":
        data = data or {}
        return cls(name=data.get("name"), email=data.get("email"), date=data.get("date"))


@dataclass(frozen=True)
class CommitInfo(_Serializable):
    sha: str
    message: str
    author: CommitIdentity
    committer: CommitIdentity
    url: Optional[str]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CommitInfo":
        commit = data.get("commit") or {}
        return cls(
            sha=data.get("sha", ""),
            message=commit.get("message", ""),
            author=CommitIdentity.from_api(commit.get("author")),
            committer=CommitIdentity.from_api(commit.get("committer")),
            url=data.get("html_url"),
        )


@dataclass(frozen=True)
class BranchInfo(_Serializable):
    name: str
    sha: str
    protected: bool

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BranchInfo":
        return cls(
            name=data.get("name", ""),
            sha=(data.get("commit") or {}).get("sha", ""),
            protected=bool(data.get("protected", False)),
        )


@dataclass(frozen=True)
class GitRefInfo(_Serializable):
    ref: str
    sha: str

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "GitRefInfo":
        data = data or {}
        return cls(ref=data.get("ref", ""), sha=data.get("sha", ""))


@dataclass(frozen=True)
class PullRequestInfo(_Serializable):
    number: int
    title: str
    state: str
    body: Optional[str]
    url: Optional[str]
    head: GitRefInfo
    base: GitRefInfo
    user: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
    merged_at: Optional[str]
    draft: bool

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequestInfo":
        return cls(
            number=data["number"],
            title=data.get("title", ""),
            state=data.get("state", ""),
            body=data.get("body"),
            url=data.get("html_url"),
            head=GitRefInfo.from_api(data.get("head")),
            base=GitRefInfo.from_api(data.get("base")),
            user=(data.get("user") or {}).get("login"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            merged_at=data.get("merged_at"),
            draft=bool(data.get("draft", False)),
        )


# Request options


class CommitQuery(BaseModel):
    """Filters for listing commits."""

    sha: Optional[str] = None
    path: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    per_page: int = Field(default=30, ge=1, le=100)


class PullRequestQuery(BaseModel):
    """Filters for listing pull requests."""

    state: str = "open"
    sort: str = "created"
    direction: str = "desc"
    per_page: int = Field(default=30, ge=1, le=100)


class PullRequestCreate(BaseModel):
    """Payload for opening a pull request."""

    title: str
    body: str = ""
    head: str
    base: Optional[str] = None
    draft: bool = False


class MergeOptions(BaseModel):
    """Options for merging a pull request."""

    merge_method: str = "squash"
    commit_title: Optional[str] = None
    commit_message: Optional[str] = None
