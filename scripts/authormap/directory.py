"""Abstract base class for directory clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from scripts.authormap.models import CollectionRef, Identity, ProjectRef


class MembershipExpansion(str, Enum):
    NONE = "None"
    EXPANDED = "Expanded"


class DirectoryClient(ABC):
    """Read-only view of a server's collections, projects and identities.

    Any method may raise on transport or authorization failures; callers
    decide where those are recovered.
    """

    DIRECTORY_NAME: str = ""

    @abstractmethod
    def list_project_collections(self) -> list[CollectionRef]:
        """Return the project collections hosted on the server, in server order."""

    @abstractmethod
    def list_projects(self, collection: CollectionRef) -> list[ProjectRef]:
        """Return the projects in a collection."""

    @abstractmethod
    def list_application_groups(self, project: ProjectRef) -> list[Identity]:
        """Return the project-scoped security groups."""

    @abstractmethod
    def resolve_members(
        self,
        project: ProjectRef,
        group: Identity,
        expansion: MembershipExpansion,
    ) -> list[Identity]:
        """Read a group with its membership populated to the requested depth."""

    @abstractmethod
    def resolve_identity(
        self,
        project: ProjectRef,
        identity_id: str,
        expansion: MembershipExpansion = MembershipExpansion.NONE,
    ) -> Identity:
        """Read a single identity by descriptor within the project's collection."""
