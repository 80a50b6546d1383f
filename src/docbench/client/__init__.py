"""Remote document store clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docbench.client.base import (
    ConnectionMode,
    ConsistencyLevel,
    Document,
    DocumentClient,
    QuerySpec,
    RequestOptions,
)
from docbench.client.memory import MemoryDocumentClient

if TYPE_CHECKING:
    from docbench.config import Settings

__all__ = [
    "ConnectionMode",
    "ConsistencyLevel",
    "Document",
    "DocumentClient",
    "MemoryDocumentClient",
    "QuerySpec",
    "RequestOptions",
    "connect",
]


def connect(settings: Settings) -> DocumentClient:
    """Create the client selected by ``settings.client_type``."""
    if settings.client_type == "memory":
        return MemoryDocumentClient(
            endpoint=settings.endpoint,
            credential=settings.credential.get_secret_value(),
            connection_mode=settings.connection_mode,
            consistency_level=settings.consistency_level,
            partitioned=not settings.single_partition,
        )

    from docbench.client.cosmos import CosmosDocumentClient

    return CosmosDocumentClient(
        endpoint=settings.endpoint,
        credential=settings.credential.get_secret_value(),
        connection_mode=settings.connection_mode,
        consistency_level=settings.consistency_level,
    )
