"""Server -> collection -> project traversal."""

from __future__ import annotations

import logging
import time

from scripts.authormap.directory import DirectoryClient
from scripts.authormap.identity_resolver import iter_project_users
from scripts.authormap.models import CollectionRef, ProjectRef, ProjectScan, ScanResult

logger = logging.getLogger("authormap.walker")


class HierarchyWalker:
    """Collects every user identity on a server, one project at a time.

    A failing project is recorded and skipped. Failures while listing
    collections or projects are not caught and abort the scan.
    """

    def __init__(self, client: DirectoryClient) -> None:
        self.client = client

    def scan(self) -> ScanResult:
        result = ScanResult()
        started = time.monotonic()
        logger.info("Scanning %s for users...", self.client.DIRECTORY_NAME or "server")

        for collection in self.client.list_project_collections():
            logger.info("  collection: %s", collection.name, extra={"collection": collection.name})
            for project in self.client.list_projects(collection):
                logger.info(
                    "    project: %s", project.name,
                    extra={"collection": collection.name, "project": project.name},
                )
                result.add(self.scan_project(collection, project))

        logger.info(
            "Scan complete: %d identities from %d projects (%d skipped)",
            len(result.identities),
            result.projects_scanned,
            len(result.failures),
            extra={
                "identities": len(result.identities),
                "duration_s": round(time.monotonic() - started, 3),
            },
        )
        return result

    def scan_project(self, collection: CollectionRef, project: ProjectRef) -> ProjectScan:
        """Resolve one project's users, turning any error into a failed ProjectScan."""
        try:
            identities = list(iter_project_users(self.client, project))
        except Exception as exc:
            logger.warning(
                "The project '%s' throws an exception: %s and will be ignored.",
                project.name,
                exc,
                extra={"collection": collection.name, "project": project.name},
            )
            return ProjectScan(project=project, error=str(exc))

        logger.debug(
            "Resolved %d identities", len(identities),
            extra={
                "collection": collection.name,
                "project": project.name,
                "identities": len(identities),
            },
        )
        return ProjectScan(project=project, identities=identities)
