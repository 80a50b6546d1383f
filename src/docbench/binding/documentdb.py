"""
Document store binding.

Maps the five harness operations onto collection and document resources:

- read: point read of ``databases/{db}/collections/{table}/documents/{key}``
- scan: parameterized ``id >= start_key`` query over the collection
- update: read, merge, then replace guarded by the version tag just read
- insert: create (or upsert when configured) of an encoded document
- delete: point delete

Policy notes:
- ``fields`` is accepted by read/scan but the full record is returned.
- Updating a missing record is a no-op success; deleting one is an error.
- Any remote failure is logged and reported as ``Status.ERROR``; nothing is
  retried.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from docbench import codec
from docbench.addressing import collection_path, document_path
from docbench.binding.base import Binding, Status
from docbench.client import DocumentClient, connect
from docbench.config import Settings, load_settings
from docbench.errors import RemoteCallError
from docbench.logging import configure_logging
from docbench.policy import RequestPolicy, scan_query, with_optimistic_concurrency

logger = structlog.get_logger()


class DocumentDBBinding(Binding):
    """Binding for a partitioned document store."""

    def __init__(self, settings: Settings | None = None, client: DocumentClient | None = None):
        self.settings = settings
        self.policy: RequestPolicy | None = None
        self._client = client
        if settings is not None:
            self.policy = RequestPolicy(single_partition=settings.single_partition)

    @property
    def client(self) -> DocumentClient:
        if self._client is None:
            raise RuntimeError("DocumentDBBinding.init() has not been called")
        return self._client

    def init(self) -> None:
        if self.settings is None:
            self.settings = load_settings()
            self.policy = RequestPolicy(single_partition=self.settings.single_partition)

        configure_logging(self.settings)

        if self._client is None:
            self._client = connect(self.settings)

        logger.info(
            "documentdb_binding_initialized",
            endpoint=self.settings.endpoint,
            database=self.settings.database,
            single_partition=self.settings.single_partition,
            upsert=self.settings.upsert,
        )

    def cleanup(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _failed(self, operation: str, table: str, key: str, error: RemoteCallError) -> Status:
        logger.error(
            "remote_call_failed",
            operation=operation,
            table=table,
            key=key,
            **error.to_dict(),
        )
        return Status.ERROR

    def read(
        self, table: str, key: str, fields: set[str] | None, result: dict[str, str]
    ) -> Status:
        logger.debug("read", table=table, key=key)

        path = document_path(self.settings.database, table, key)
        try:
            document = self.client.read_document(path, self.policy.request_options_for(key))
        except RemoteCallError as e:
            return self._failed("read", table, key, e)

        if document is not None:
            result.update(codec.decode(document))
            logger.debug("read_result", table=table, key=key, record=result)

        return Status.OK

    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None,
        result: list[dict[str, str]],
    ) -> Status:
        logger.debug("scan", table=table, start_key=start_key, record_count=record_count)

        try:
            documents = self.client.query_documents(
                collection_path(self.settings.database, table),
                scan_query(start_key, record_count),
                self.policy.feed_options_for(),
            )
        except RemoteCallError as e:
            return self._failed("scan", table, start_key, e)

        for document in documents:
            result.append(codec.decode(document))

        return Status.OK

    def update(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        logger.debug("update", table=table, key=key)

        path = document_path(self.settings.database, table, key)
        options = self.policy.request_options_for(key)
        try:
            document = self.client.read_document(path, options)
        except RemoteCallError as e:
            return self._failed("update", table, key, e)

        if document is None:
            # Missing record: reported as success, nothing is written.
            logger.debug("update_skipped_missing", table=table, key=key)
            return Status.OK

        merged = codec.merge(document, values)
        try:
            self.client.replace_document(
                merged, with_optimistic_concurrency(options, document.etag)
            )
        except RemoteCallError as e:
            return self._failed("update", table, key, e)

        return Status.OK

    def insert(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        logger.debug("insert", table=table, key=key)

        document = codec.encode(key, values)
        path = collection_path(self.settings.database, table)
        options = self.policy.request_options_for(key)
        try:
            if self.settings.upsert:
                self.client.upsert_document(path, document, options)
            else:
                self.client.create_document(path, document, options)
        except RemoteCallError as e:
            return self._failed("insert", table, key, e)

        return Status.OK

    def delete(self, table: str, key: str) -> Status:
        logger.debug("delete", table=table, key=key)

        try:
            self.client.delete_document(
                document_path(self.settings.database, table, key),
                self.policy.request_options_for(key),
            )
        except RemoteCallError as e:
            return self._failed("delete", table, key, e)

        return Status.OK
