"""Directory records passed between the walker, resolver and mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class IdentityKind(str, Enum):
    USER = "User"
    GROUP = "Group"


@dataclass(frozen=True)
class Identity:
    kind: IdentityKind
    canonical_id: str
    domain: str = ""
    account_name: str = ""
    display_name: str = ""
    mail_address: str = ""
    # Descriptors of child principals; only groups carry any
    member_ids: tuple[str, ...] = ()

    @property
    def is_user(self) -> bool:
        return self.kind is IdentityKind.USER


@dataclass(frozen=True)
class CollectionRef:
    id: str
    name: str
    url: str = ""


@dataclass(frozen=True)
class ProjectRef:
    id: str
    name: str
    collection: CollectionRef


@dataclass
class ProjectScan:
    """Outcome of resolving one project: its users, or the reason it was skipped."""

    project: ProjectRef
    identities: list[Identity] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScanResult:
    """Every user seen during one scan, in encounter order (duplicates included)."""

    identities: list[Identity] = field(default_factory=list)
    failures: list[ProjectScan] = field(default_factory=list)
    projects_scanned: int = 0

    def add(self, scan: ProjectScan) -> None:
        self.projects_scanned += 1
        if scan.ok:
            self.identities.extend(scan.identities)
        else:
            self.failures.append(scan)
