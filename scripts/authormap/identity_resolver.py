"""Per-project user resolution.

Reads a project's application groups, expands each group's membership and
looks up every member descriptor once more to find the individual users.
"""

from __future__ import annotations

import logging
from typing import Iterator

from scripts.authormap.directory import DirectoryClient, MembershipExpansion
from scripts.authormap.models import Identity, ProjectRef

logger = logging.getLogger("authormap.identity_resolver")


def iter_project_users(client: DirectoryClient, project: ProjectRef) -> Iterator[Identity]:
    """Yield the user identities reachable from a project's application groups.

    Members that resolve to groups are dropped rather than expanded again.
    Lookup errors are not caught here; one bad member fails the project.
    """
    groups = client.list_application_groups(project)
    logger.debug(
        "Found %d application groups", len(groups),
        extra={"collection": project.collection.name, "project": project.name},
    )
    for group in groups:
        for member in client.resolve_members(project, group, MembershipExpansion.EXPANDED):
            if not member.member_ids:
                continue
            for member_id in member.member_ids:
                identity = client.resolve_identity(project, member_id, MembershipExpansion.NONE)
                if identity.is_user:
                    yield identity
