"""Azure DevOps Server / TFS directory client: collections, projects, groups, identities."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import requests

from scripts.authormap.config import ServerConfig
from scripts.authormap.directory import DirectoryClient, MembershipExpansion
from scripts.authormap.errors import AuthenticationError, IdentityNotFoundError
from scripts.authormap.models import CollectionRef, Identity, IdentityKind, ProjectRef

logger = logging.getLogger("authormap.azure_devops")

CONTINUATION_HEADER = "x-ms-continuationtoken"


class AzureDevOpsClient(DirectoryClient):
    DIRECTORY_NAME = "Azure DevOps"

    def __init__(self, config: ServerConfig, session: Optional[requests.Session] = None) -> None:
        self._base = config.url.rstrip("/")
        self._api_version = config.api_version
        self._timeout = config.request_timeout
        self._max_retries = config.max_retries
        self._session = session or requests.Session()
        # PAT basic auth: empty user name, token as password
        self._session.auth = ("", config.token)
        self._session.headers.update({"Accept": "application/json"})
        self._scope_descriptors: dict[str, str] = {}

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _get(self, url: str, params: Optional[dict] = None, api_version: Optional[str] = None) -> requests.Response:
        """GET with the api-version parameter, backing off while throttled."""
        params = dict(params or {})
        params.setdefault("api-version", api_version or self._api_version)
        attempt = 0

        while True:
            resp = self._session.get(url, params=params, timeout=self._timeout)
            if resp.status_code == 429 and attempt < self._max_retries:
                self._throttle_sleep(attempt, resp.headers.get("Retry-After"))
                attempt += 1
                continue
            resp.raise_for_status()
            return resp

    def _get_paginated(
        self,
        url: str,
        params: Optional[dict] = None,
        api_version: Optional[str] = None,
    ) -> list[dict]:
        """Fetch every page of a list endpoint, following continuation tokens."""
        results: list[dict] = []
        params = dict(params or {})

        while True:
            resp = self._get(url, params, api_version)
            results.extend(resp.json().get("value", []))
            token = resp.headers.get(CONTINUATION_HEADER)
            if not token:
                return results
            params["continuationToken"] = token

    @staticmethod
    def _throttle_sleep(attempt: int, retry_after: Optional[str] = None) -> None:
        """Honour Retry-After, else exponential backoff capped at 60s."""
        try:
            delay = float(retry_after) if retry_after else 2.0 ** attempt
        except ValueError:
            delay = 2.0 ** attempt
        delay = min(delay, 60.0)
        logger.warning("Throttled, sleeping %.1fs (attempt %d)", delay, attempt + 1)
        time.sleep(delay)

    @property
    def _graph_api_version(self) -> str:
        return f"{self._api_version}-preview.1"

    def _collection_url(self, collection: CollectionRef) -> str:
        return f"{self._base}/{quote(collection.name)}"

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def authenticate(self) -> str:
        """Check the credentials against the server. Returns the signed-in user's name."""
        resp = self._session.get(f"{self._base}/_apis/connectionData", timeout=self._timeout)
        # A rejected PAT comes back as 203 with an HTML sign-in page
        if resp.status_code in (203, 401, 403):
            raise AuthenticationError("Authentication to Azure DevOps failed.")
        resp.raise_for_status()

        user = resp.json().get("authenticatedUser") or {}
        if not user.get("id"):
            raise AuthenticationError("Authentication to Azure DevOps failed.")
        name = user.get("providerDisplayName", "")
        logger.info("Authenticated as %s", name)
        return name

    # ------------------------------------------------------------------
    # DirectoryClient
    # ------------------------------------------------------------------

    def list_project_collections(self) -> list[CollectionRef]:
        collections = self._get_paginated(f"{self._base}/_apis/projectCollections")
        return [
            CollectionRef(id=c["id"], name=c["name"], url=c.get("url", ""))
            for c in collections
        ]

    def list_projects(self, collection: CollectionRef) -> list[ProjectRef]:
        projects = self._get_paginated(
            f"{self._collection_url(collection)}/_apis/projects",
            params={"$top": "100"},
        )
        return [
            ProjectRef(id=p["id"], name=p["name"], collection=collection)
            for p in projects
        ]

    def list_application_groups(self, project: ProjectRef) -> list[Identity]:
        scope = self._scope_descriptor(project)
        groups = self._get_paginated(
            f"{self._collection_url(project.collection)}/_apis/graph/groups",
            params={"scopeDescriptor": scope},
            api_version=self._graph_api_version,
        )
        return [_graph_group_to_identity(g) for g in groups]

    def resolve_members(
        self,
        project: ProjectRef,
        group: Identity,
        expansion: MembershipExpansion,
    ) -> list[Identity]:
        resp = self._get(
            f"{self._collection_url(project.collection)}/_apis/identities",
            params={
                "subjectDescriptors": group.canonical_id,
                "queryMembership": expansion.value,
            },
        )
        return [_to_identity(i) for i in resp.json().get("value", []) if i]

    def resolve_identity(
        self,
        project: ProjectRef,
        identity_id: str,
        expansion: MembershipExpansion = MembershipExpansion.NONE,
    ) -> Identity:
        resp = self._get(
            f"{self._collection_url(project.collection)}/_apis/identities",
            params={"descriptors": identity_id, "queryMembership": expansion.value},
        )
        found = [i for i in resp.json().get("value", []) if i]
        if not found:
            raise IdentityNotFoundError(identity_id)
        return _to_identity(found[0])

    def _scope_descriptor(self, project: ProjectRef) -> str:
        """Graph scope descriptor for a project, cached per project id."""
        if project.id not in self._scope_descriptors:
            resp = self._get(
                f"{self._collection_url(project.collection)}/_apis/graph/descriptors/{project.id}",
                api_version=self._graph_api_version,
            )
            self._scope_descriptors[project.id] = resp.json()["value"]
        return self._scope_descriptors[project.id]


def _property(properties: dict[str, Any], name: str) -> str:
    """Read an identity property, which arrives as {"$type": ..., "$value": ...}."""
    value = properties.get(name)
    if isinstance(value, dict):
        value = value.get("$value")
    return str(value) if value is not None else ""


def _to_identity(data: dict[str, Any]) -> Identity:
    properties = data.get("properties") or {}
    is_group = bool(data.get("isContainer")) or _property(properties, "SchemaClassName") == "Group"
    return Identity(
        kind=IdentityKind.GROUP if is_group else IdentityKind.USER,
        canonical_id=data["descriptor"],
        domain=_property(properties, "Domain"),
        account_name=_property(properties, "Account"),
        display_name=data.get("providerDisplayName") or "",
        mail_address=_property(properties, "Mail"),
        member_ids=tuple(data.get("members") or ()),
    )


def _graph_group_to_identity(data: dict[str, Any]) -> Identity:
    return Identity(
        kind=IdentityKind.GROUP,
        canonical_id=data["descriptor"],
        domain=data.get("domain") or "",
        account_name=data.get("principalName") or "",
        display_name=data.get("displayName") or "",
        mail_address=data.get("mailAddress") or "",
    )
