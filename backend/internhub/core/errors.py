"""Exception hierarchy shared by gateways, identity providers and services."""

from __future__ import annotations


class InternHubError(Exception):
    """Base class for every error raised inside InternHub."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class DocumentStoreError(InternHubError):
    """The document store rejected or failed a call."""


class DocumentNotFound(DocumentStoreError):
    """A document addressed by id does not exist."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__("Document not found")
        self.collection = collection
        self.doc_id = doc_id


class AuthError(InternHubError):
    """The identity provider refused a credential operation."""
