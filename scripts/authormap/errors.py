"""Exceptions raised by the directory client."""

from __future__ import annotations


class AuthorMapError(Exception):
    """Base class for authormap errors."""


class AuthenticationError(AuthorMapError):
    """The server did not accept the supplied credentials."""


class IdentityNotFoundError(AuthorMapError):
    """An identity lookup by descriptor returned nothing."""

    def __init__(self, identity_id: str) -> None:
        super().__init__(f"Identity not found: {identity_id}")
        self.identity_id = identity_id
