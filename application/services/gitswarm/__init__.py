"""
GitSwarm Service Package

Mediates GitHub access for GitSwarm organizations and repositories using
GitHub App installation tokens.

Main Components:
- GitSwarmService: Facade for all supported repository operations
- Auth: App JWTs, installation token issuance and per-organization caching
- API Client: GitHub REST API interactions
- Repository Resolution: GitSwarm ids to GitHub installations and slugs
"""

from application.services.gitswarm.gitswarm_service import GitSwarmService

__all__ = ["GitSwarmService"]
