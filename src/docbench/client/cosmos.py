"""Azure Cosmos DB (DocumentDB API) client backend."""

from contextlib import ExitStack, contextmanager
from typing import Any, Iterator

import structlog
from azure.core import MatchConditions
from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, documents, exceptions
from azure.cosmos.partition_key import NonePartitionKeyValue

from docbench.addressing import document_path, split_path
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
    DocumentNotFoundError,
    RemoteCallError,
    error_for_status,
)

logger = structlog.get_logger()

# Properties the store adds to every item; not part of the record.
SYSTEM_PROPERTIES = frozenset({"_rid", "_self", "_etag", "_attachments", "_ts"})

_CONSISTENCY_LEVELS = {
    ConsistencyLevel.STRONG: documents.ConsistencyLevel.Strong,
    ConsistencyLevel.BOUNDED_STALENESS: documents.ConsistencyLevel.BoundedStaleness,
    ConsistencyLevel.SESSION: documents.ConsistencyLevel.Session,
    ConsistencyLevel.CONSISTENT_PREFIX: documents.ConsistencyLevel.ConsistentPrefix,
    ConsistencyLevel.EVENTUAL: documents.ConsistencyLevel.Eventual,
}


class CosmosDocumentClient(DocumentClient):
    """
    Document client backed by the azure-cosmos SDK.

    The SDK addresses resources by name, so paths are split into database,
    container and item id. The SDK only routes through the gateway; direct
    mode is accepted and falls back to gateway.
    """

    def __init__(
        self,
        endpoint: str,
        credential: str,
        connection_mode: ConnectionMode = ConnectionMode.GATEWAY,
        consistency_level: ConsistencyLevel = ConsistencyLevel.SESSION,
    ):
        self.endpoint = endpoint
        self.connection_mode = connection_mode
        self.consistency_level = consistency_level

        if connection_mode is ConnectionMode.DIRECT:
            logger.warning("direct_mode_unsupported", fallback=ConnectionMode.GATEWAY.value)

        self._exit_stack = ExitStack()
        self.client = self._exit_stack.enter_context(
            CosmosClient(
                endpoint,
                credential=credential,
                consistency_level=_CONSISTENCY_LEVELS[consistency_level],
                connection_mode=documents.ConnectionMode.Gateway,
            )
        )

        logger.info(
            "cosmos_client_initialized",
            endpoint=endpoint,
            connection_mode=connection_mode.value,
            consistency_level=consistency_level.value,
        )

    def _container(self, path: str):
        try:
            database, collection, _ = split_path(path)
        except ValueError as e:
            raise BadRequestError(str(e), cause=e)
        return self.client.get_database_client(database).get_container_client(collection)

    def _item_id(self, path: str) -> str:
        try:
            _, _, item_id = split_path(path)
        except ValueError as e:
            raise BadRequestError(str(e), cause=e)
        if item_id is None:
            raise BadRequestError(f"Not a document path: {path}")
        return item_id

    def _partition_key(self, options: RequestOptions) -> Any:
        if options.partition_key is None:
            return NonePartitionKeyValue
        return options.partition_key

    def _to_document(self, item: dict[str, Any], path: str) -> Document:
        database, collection, _ = split_path(path)
        fields = {
            name: value
            for name, value in item.items()
            if name != "id" and name not in SYSTEM_PROPERTIES
        }
        return Document(
            id=item["id"],
            fields=fields,
            etag=item.get("_etag"),
            path=document_path(database, collection, item["id"]),
        )

    def _to_item(self, document: Document) -> dict[str, Any]:
        return {**document.fields, "id": document.id}

    @contextmanager
    def _translate_errors(self, operation: str, path: str) -> Iterator[None]:
        try:
            yield
        except exceptions.CosmosHttpResponseError as e:
            raise error_for_status(
                e.status_code, f"{operation} failed for {path}: {e.message}", cause=e
            )
        except AzureError as e:
            # Connection failures and client-side timeouts carry no status code.
            raise RemoteCallError(f"{operation} failed for {path}: {e}", cause=e)

    def read_document(self, path: str, options: RequestOptions) -> Document | None:
        container = self._container(path)
        item_id = self._item_id(path)

        try:
            with self._translate_errors("read", path):
                item = container.read_item(
                    item=item_id, partition_key=self._partition_key(options)
                )
        except DocumentNotFoundError:
            return None

        return self._to_document(item, path)

    def query_documents(
        self, collection_path: str, query: QuerySpec, options: RequestOptions
    ) -> list[Document]:
        container = self._container(collection_path)

        kwargs: dict[str, Any] = {}
        if options.enable_cross_partition_query is not None:
            kwargs["enable_cross_partition_query"] = options.enable_cross_partition_query

        with self._translate_errors("query", collection_path):
            items = list(
                container.query_items(
                    query=query.text,
                    parameters=[
                        {"name": name, "value": value}
                        for name, value in query.parameters.items()
                    ],
                    **kwargs,
                )
            )

        return [self._to_document(item, collection_path) for item in items]

    def create_document(
        self, collection_path: str, document: Document, options: RequestOptions
    ) -> Document:
        container = self._container(collection_path)

        with self._translate_errors("create", collection_path):
            item = container.create_item(body=self._to_item(document))

        return self._to_document(item, collection_path)

    def upsert_document(
        self, collection_path: str, document: Document, options: RequestOptions
    ) -> Document:
        container = self._container(collection_path)

        with self._translate_errors("upsert", collection_path):
            item = container.upsert_item(body=self._to_item(document))

        return self._to_document(item, collection_path)

    def replace_document(self, document: Document, options: RequestOptions) -> Document:
        if document.path is None:
            raise BadRequestError(f"Document {document.id} has no resource path")
        container = self._container(document.path)

        kwargs: dict[str, Any] = {}
        if options.if_match is not None:
            kwargs["etag"] = options.if_match
            kwargs["match_condition"] = MatchConditions.IfNotModified

        with self._translate_errors("replace", document.path):
            item = container.replace_item(
                item=document.id, body=self._to_item(document), **kwargs
            )

        return self._to_document(item, document.path)

    def delete_document(self, path: str, options: RequestOptions) -> None:
        container = self._container(path)
        item_id = self._item_id(path)

        with self._translate_errors("delete", path):
            container.delete_item(item=item_id, partition_key=self._partition_key(options))

    def close(self) -> None:
        self._exit_stack.close()
