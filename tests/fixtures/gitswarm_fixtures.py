"""
Test fixtures for GitSwarm service tests.

Provides an in-memory metadata store, a controllable clock and a recording
token issuer so token expiry can be exercised without real time passing.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from application.services.gitswarm.auth.token_issuer import TokenIssuer
from application.services.gitswarm.repository.resolver import MetadataQuery

ORG_ID = "0b6c5a7e-1f1e-4f63-9d7e-1c1f4c2f0a01"
OTHER_ORG_ID = "7d2e1b9c-3a44-4c11-8e55-2b7f9a6d0b02"
INACTIVE_ORG_ID = "c4f0e8a2-5b66-4d22-9f77-3c8e0b7e0c03"
REPO_ID = "5e1d7c3b-7c88-4e33-a099-4d9f1c8f0d04"
SIBLING_REPO_ID = "9a3b2c1d-9daa-4f44-b1bb-5eaf2d9a0e05"
OTHER_REPO_ID = "e2f4a6c8-1bcc-4a55-82dd-6fb03eab0f06"

INSTALLATION_ID = 4242
OTHER_INSTALLATION_ID = 5151

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def create_test_orgs() -> Dict[str, Dict[str, Any]]:
    return {
        ORG_ID: {
            "id": ORG_ID,
            "status": "active",
            "github_installation_id": INSTALLATION_ID,
            "github_org_name": "swarm-org",
        },
        OTHER_ORG_ID: {
            "id": OTHER_ORG_ID,
            "status": "active",
            "github_installation_id": OTHER_INSTALLATION_ID,
            "github_org_name": "other-org",
        },
        INACTIVE_ORG_ID: {
            "id": INACTIVE_ORG_ID,
            "status": "suspended",
            "github_installation_id": 6161,
            "github_org_name": "sleepy-org",
        },
    }


def create_test_repos() -> Dict[str, Dict[str, Any]]:
    return {
        REPO_ID: {
            "id": REPO_ID,
            "org_id": ORG_ID,
            "github_full_name": "swarm-org/hive",
            "default_branch": "main",
        },
        SIBLING_REPO_ID: {
            "id": SIBLING_REPO_ID,
            "org_id": ORG_ID,
            "github_full_name": "swarm-org/comb",
            "default_branch": "trunk",
        },
        OTHER_REPO_ID: {
            "id": OTHER_REPO_ID,
            "org_id": OTHER_ORG_ID,
            "github_full_name": "other-org/nest",
            "default_branch": "main",
        },
    }


class FakeMetadataQuery(MetadataQuery):
    """In-memory stand-in for the gitswarm_orgs / gitswarm_repos tables."""

    def __init__(
        self,
        orgs: Optional[Dict[str, Dict[str, Any]]] = None,
        repos: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.orgs = create_test_orgs() if orgs is None else orgs
        self.repos = create_test_repos() if repos is None else repos
        self.calls: List[tuple] = []

    async def query(self, text: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append((text, list(params)))
        key = params[0]

        if "JOIN gitswarm_orgs" in text:
            repo = self.repos.get(key)
            if repo is None:
                return []
            org = self.orgs.get(repo["org_id"], {})
            return [
                {
                    **repo,
                    "status": org.get("status"),
                    "github_org_name": org.get("github_org_name"),
                    "github_installation_id": org.get("github_installation_id"),
                }
            ]
        if "FROM gitswarm_repos" in text:
            return [self.repos[key]] if key in self.repos else []
        if "FROM gitswarm_orgs" in text:
            return [self.orgs[key]] if key in self.orgs else []
        raise AssertionError(f"Unexpected query: {text}")


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeTokenIssuer(TokenIssuer):
    """Records calls and hands out numbered tokens.

    Queued responses are returned (or raised, for exceptions) first; after
    that each call yields ``{"token": "t<n>", "expires_at": now + lifetime}``.
    """

    def __init__(self, clock: FakeClock, lifetime_seconds: int = 3600):
        self.clock = clock
        self.lifetime_seconds = lifetime_seconds
        self.responses: List[Any] = []
        self.calls: List[int] = []

    async def get_installation_token(self, installation_id: int):
        self.calls.append(installation_id)
        if self.responses:
            response = self.responses.pop(0)
        else:
            expires_at = self.clock() + timedelta(seconds=self.lifetime_seconds)
            response = {
                "token": f"t{len(self.calls)}",
                "expires_at": expires_at.isoformat().replace("+00:00", "Z"),
            }
        # Yield so concurrent callers interleave like a real network call
        await asyncio.sleep(0)
        if isinstance(response, Exception):
            raise response
        return response
