"""Base remote document client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from docbench.policy import QuerySpec, RequestOptions


class ConnectionMode(str, Enum):
    """How the client routes requests to the store."""

    DIRECT = "direct"
    GATEWAY = "gateway"


class ConsistencyLevel(str, Enum):
    """Read/write visibility guarantee requested at connection setup."""

    STRONG = "strong"
    BOUNDED_STALENESS = "bounded_staleness"
    SESSION = "session"
    CONSISTENT_PREFIX = "consistent_prefix"
    EVENTUAL = "eventual"


@dataclass
class Document:
    """A stored document: id, flat field mapping and version tag."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    etag: str | None = None
    path: str | None = None


class DocumentClient(ABC):
    """
    Abstract base class for remote document store clients.

    Resources are addressed by slash-delimited paths (see
    ``docbench.addressing``). Implementations must be safe to share between
    threads. Failures are raised as ``RemoteCallError`` subclasses.
    """

    @abstractmethod
    def read_document(self, path: str, options: RequestOptions) -> Document | None:
        """
        Read a single document.

        Args:
            path: Document path
            options: Per-call request options

        Returns:
            The document, or None if it doesn't exist
        """
        ...

    @abstractmethod
    def query_documents(
        self, collection_path: str, query: QuerySpec, options: RequestOptions
    ) -> list[Document]:
        """
        Run a parameterized query against a collection.

        Returns:
            Matching documents in the order the store produced them
        """
        ...

    @abstractmethod
    def create_document(
        self, collection_path: str, document: Document, options: RequestOptions
    ) -> Document:
        """
        Create a document.

        Raises:
            DocumentConflictError: If a document with the same id exists
        """
        ...

    @abstractmethod
    def upsert_document(
        self, collection_path: str, document: Document, options: RequestOptions
    ) -> Document:
        """Create a document or overwrite the existing one with the same id."""
        ...

    @abstractmethod
    def replace_document(self, document: Document, options: RequestOptions) -> Document:
        """
        Replace an existing document at ``document.path``.

        Raises:
            DocumentNotFoundError: If the document doesn't exist
            PreconditionFailedError: If ``options.if_match`` is stale
        """
        ...

    @abstractmethod
    def delete_document(self, path: str, options: RequestOptions) -> None:
        """
        Delete a document.

        Raises:
            DocumentNotFoundError: If the document doesn't exist
        """
        ...

    def close(self) -> None:
        """Release client resources."""
        pass
