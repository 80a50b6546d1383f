"""In-process document client."""

from __future__ import annotations

import threading
import uuid

import structlog

from docbench.addressing import DOCUMENTS_PATH_SEGMENT, split_path
from docbench.addressing import collection_path as build_collection_path
from docbench.client.base import (
    ConnectionMode,
    ConsistencyLevel,
    Document,
    DocumentClient,
    QuerySpec,
    RequestOptions,
)
from docbench.errors import (
    BadRequestError,
    DocumentConflictError,
    DocumentNotFoundError,
    PreconditionFailedError,
)
from docbench.policy import SCAN_QUERY

logger = structlog.get_logger()


class MemoryDocumentClient(DocumentClient):
    """
    Document client backed by process memory.

    Behaves like a store whose collections are partitioned on ``/id`` (or
    unpartitioned with ``partitioned=False``): point operations must carry a
    partition key equal to the document id and queries must opt in to
    cross-partition execution. Every write issues a new version tag, and
    ``if_match`` is checked under the same lock as the write.
    """

    def __init__(
        self,
        endpoint: str = "memory://",
        credential: str | None = None,
        connection_mode: ConnectionMode = ConnectionMode.GATEWAY,
        consistency_level: ConsistencyLevel = ConsistencyLevel.SESSION,
        partitioned: bool = True,
    ):
        self.endpoint = endpoint
        self.connection_mode = connection_mode
        self.consistency_level = consistency_level
        self.partitioned = partitioned
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = threading.Lock()
        self.closed = False

        logger.info(
            "memory_client_initialized",
            endpoint=endpoint,
            partitioned=partitioned,
            connection_mode=connection_mode.value,
            consistency_level=consistency_level.value,
        )

    def _new_etag(self) -> str:
        return f'"{uuid.uuid4()}"'

    def _resolve(self, path: str) -> tuple[str, str]:
        """Split a document path into (collection_path, document_id)."""
        try:
            database, collection, document_id = split_path(path)
        except ValueError as e:
            raise BadRequestError(str(e), cause=e)
        if document_id is None:
            raise BadRequestError(f"Not a document path: {path}")
        return build_collection_path(database, collection), document_id

    def _check_collection_path(self, path: str) -> None:
        try:
            _, _, document_id = split_path(path)
        except ValueError as e:
            raise BadRequestError(str(e), cause=e)
        if document_id is not None:
            raise BadRequestError(f"Not a collection path: {path}")

    def _check_partition_key(self, document_id: str, options: RequestOptions) -> bool:
        """Whether the options route to the document's partition."""
        if not self.partitioned:
            return True
        if options.partition_key is None:
            raise BadRequestError(
                "Partition key must be supplied for this operation on a partitioned collection"
            )
        return options.partition_key == document_id

    def _copy(self, document: Document, path: str) -> Document:
        return Document(
            id=document.id,
            fields=dict(document.fields),
            etag=document.etag,
            path=path,
        )

    def _store(self, collection: str, document: Document) -> Document:
        stored = Document(
            id=document.id,
            fields=dict(document.fields),
            etag=self._new_etag(),
            path=f"{collection}/{DOCUMENTS_PATH_SEGMENT}/{document.id}",
        )
        self._collections.setdefault(collection, {})[document.id] = stored
        return self._copy(stored, stored.path)

    def read_document(self, path: str, options: RequestOptions) -> Document | None:
        collection, document_id = self._resolve(path)

        with self._lock:
            if not self._check_partition_key(document_id, options):
                return None
            document = self._collections.get(collection, {}).get(document_id)
            if document is None:
                return None
            return self._copy(document, path)

    def query_documents(
        self, collection_path: str, query: QuerySpec, options: RequestOptions
    ) -> list[Document]:
        self._check_collection_path(collection_path)
        if query.text != SCAN_QUERY:
            raise BadRequestError(f"Unsupported query: {query.text}")
        if self.partitioned and not options.enable_cross_partition_query:
            raise BadRequestError(
                "Cross partition query is required but disabled"
            )

        start_key = query.parameters["@start_key"]
        count = int(query.parameters["@count"])
        if count < 0:
            raise BadRequestError(f"TOP count must not be negative: {count}")

        with self._lock:
            documents = sorted(
                self._collections.get(collection_path, {}).values(),
                key=lambda d: d.id,
            )
            matches = [d for d in documents if d.id >= start_key][:count]
            return [self._copy(d, d.path) for d in matches]

    def create_document(
        self, collection_path: str, document: Document, options: RequestOptions
    ) -> Document:
        self._check_collection_path(collection_path)

        with self._lock:
            if not self._check_partition_key(document.id, options):
                raise BadRequestError("Partition key doesn't match the document id")
            if document.id in self._collections.get(collection_path, {}):
                raise DocumentConflictError(
                    f"Entity with the specified id already exists: {document.id}"
                )
            return self._store(collection_path, document)

    def upsert_document(
        self, collection_path: str, document: Document, options: RequestOptions
    ) -> Document:
        self._check_collection_path(collection_path)

        with self._lock:
            if not self._check_partition_key(document.id, options):
                raise BadRequestError("Partition key doesn't match the document id")
            return self._store(collection_path, document)

    def replace_document(self, document: Document, options: RequestOptions) -> Document:
        if document.path is None:
            raise BadRequestError(f"Document {document.id} has no resource path")
        collection, document_id = self._resolve(document.path)
        if document_id != document.id:
            raise BadRequestError("Document id doesn't match its resource path")

        with self._lock:
            if not self._check_partition_key(document_id, options):
                raise BadRequestError("Partition key doesn't match the document id")
            current = self._collections.get(collection, {}).get(document_id)
            if current is None:
                raise DocumentNotFoundError(f"Document not found: {document.path}")
            if options.if_match is not None and options.if_match != current.etag:
                raise PreconditionFailedError(
                    f"Version tag mismatch for {document.path}"
                )
            return self._store(collection, document)

    def delete_document(self, path: str, options: RequestOptions) -> None:
        collection, document_id = self._resolve(path)

        with self._lock:
            documents = self._collections.get(collection, {})
            if not self._check_partition_key(document_id, options) or document_id not in documents:
                raise DocumentNotFoundError(f"Document not found: {path}")
            del documents[document_id]

    def close(self) -> None:
        self.closed = True
