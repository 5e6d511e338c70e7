"""Deduplicate scanned identities and render git-tfs author lines."""

from __future__ import annotations

from typing import Iterable

from scripts.authormap.models import Identity

LINE_FORMAT = "{domain}\\{account} = {name} <{mail}>"


def unique_identities(identities: Iterable[Identity]) -> list[Identity]:
    """Keep the first sighting of each canonical id, ordered by account name.

    Later sightings are dropped even if their name or mail differ. Python's
    ``sorted`` is stable, so equal account names keep first-seen order.
    """
    first_seen: dict[str, Identity] = {}
    for identity in identities:
        first_seen.setdefault(identity.canonical_id, identity)
    return sorted(first_seen.values(), key=lambda i: i.account_name)


def format_line(identity: Identity) -> str:
    # No escaping: '\', '<', '>' or '=' inside a field make the line ambiguous
    return LINE_FORMAT.format(
        domain=identity.domain,
        account=identity.account_name,
        name=identity.display_name,
        mail=identity.mail_address,
    )


def build_author_mapping(identities: Iterable[Identity]) -> list[str]:
    """Return the sorted, deduplicated author file lines."""
    return [format_line(i) for i in unique_identities(identities)]
