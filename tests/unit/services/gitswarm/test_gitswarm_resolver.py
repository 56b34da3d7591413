"""Tests for OrgRepoResolver."""

import pytest

from application.services.gitswarm.repository.resolver import OrgRepoResolver
from common.exception import InactiveOrganizationError, NotFoundError
from tests.fixtures.gitswarm_fixtures import (
    INACTIVE_ORG_ID,
    INSTALLATION_ID,
    ORG_ID,
    REPO_ID,
    FakeMetadataQuery,
)


class TestResolveRepository:
    """Test OrgRepoResolver.resolve_repository."""

    @pytest.mark.asyncio
    async def test_resolves_slug_org_and_default_branch(self):
        """Repository rows map to a RepositoryRecord."""
        db = FakeMetadataQuery()
        repo = await OrgRepoResolver(db).resolve_repository(REPO_ID)

        assert repo.repo_id == REPO_ID
        assert repo.org_id == ORG_ID
        assert repo.github_full_name == "swarm-org/hive"
        assert repo.owner == "swarm-org"
        assert repo.name == "hive"
        assert repo.default_branch == "main"
        assert len(db.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_repository_raises_not_found(self):
        """Unknown repository ids fail with NotFoundError."""
        resolver = OrgRepoResolver(FakeMetadataQuery())

        with pytest.raises(NotFoundError, match="repo not found"):
            await resolver.resolve_repository("does-not-exist")

    @pytest.mark.asyncio
    async def test_malformed_slug_raises_not_found(self):
        """A repository without an owner/name slug is not usable."""
        db = FakeMetadataQuery(
            repos={
                REPO_ID: {
                    "id": REPO_ID,
                    "org_id": ORG_ID,
                    "github_full_name": "no-slash",
                    "default_branch": "main",
                }
            }
        )

        with pytest.raises(NotFoundError, match="no-slash"):
            await OrgRepoResolver(db).resolve_repository(REPO_ID)

    @pytest.mark.asyncio
    async def test_metadata_is_read_fresh_every_call(self):
        """Changes to the store are visible on the next call."""
        db = FakeMetadataQuery()
        resolver = OrgRepoResolver(db)

        first = await resolver.resolve_repository(REPO_ID)
        db.repos[REPO_ID] = {**db.repos[REPO_ID], "default_branch": "develop"}
        second = await resolver.resolve_repository(REPO_ID)

        assert first.default_branch == "main"
        assert second.default_branch == "develop"
        assert len(db.calls) == 2


class TestResolveOrganization:
    """Test OrgRepoResolver.resolve_organization."""

    @pytest.mark.asyncio
    async def test_active_organization_yields_installation(self):
        """Active organizations resolve to their installation id."""
        org = await OrgRepoResolver(FakeMetadataQuery()).resolve_organization(ORG_ID)

        assert org.installation_id == INSTALLATION_ID
        assert org.is_active is True
        assert org.github_org_name == "swarm-org"

    @pytest.mark.asyncio
    async def test_inactive_organization_raises_inactive(self):
        """Organizations whose status is not active are rejected."""
        resolver = OrgRepoResolver(FakeMetadataQuery())

        with pytest.raises(InactiveOrganizationError) as exc_info:
            await resolver.resolve_organization(INACTIVE_ORG_ID)

        assert exc_info.value.org_id == INACTIVE_ORG_ID
        assert exc_info.value.status == "suspended"

    @pytest.mark.asyncio
    async def test_missing_organization_raises_not_found(self):
        """Unknown organization ids fail with NotFoundError."""
        resolver = OrgRepoResolver(FakeMetadataQuery())

        with pytest.raises(NotFoundError, match="org not found"):
            await resolver.resolve_organization("missing-org")


class TestResolveCloneTarget:
    """Test OrgRepoResolver.resolve_clone_target."""

    @pytest.mark.asyncio
    async def test_joins_repository_with_organization(self):
        """Clone targets carry the org name and installation in a single read."""
        db = FakeMetadataQuery()
        repo, org = await OrgRepoResolver(db).resolve_clone_target(REPO_ID)

        assert repo.github_full_name == "swarm-org/hive"
        assert org.org_id == ORG_ID
        assert org.github_org_name == "swarm-org"
        assert org.installation_id == INSTALLATION_ID
        assert len(db.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_repository_raises_not_found(self):
        """Unknown repository ids fail with NotFoundError."""
        with pytest.raises(NotFoundError):
            await OrgRepoResolver(FakeMetadataQuery()).resolve_clone_target("nope")
