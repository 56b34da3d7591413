"""
Repository Resolution Module

Resolves GitSwarm repositories and organizations from the metadata store.
"""

from application.services.gitswarm.repository.resolver import (
    MetadataQuery,
    OrgRepoResolver,
)

__all__ = [
    "MetadataQuery",
    "OrgRepoResolver",
]
