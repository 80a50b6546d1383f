"""Hierarchical resource paths: database -> collection -> document."""

DATABASES_PATH_SEGMENT = "databases"
COLLECTIONS_PATH_SEGMENT = "collections"
DOCUMENTS_PATH_SEGMENT = "documents"


def collection_path(database: str, table: str) -> str:
    return f"{DATABASES_PATH_SEGMENT}/{database}/{COLLECTIONS_PATH_SEGMENT}/{table}"


def document_path(database: str, table: str, key: str) -> str:
    # No escaping: a key containing "/" yields a path the store rejects.
    return f"{collection_path(database, table)}/{DOCUMENTS_PATH_SEGMENT}/{key}"


def split_path(path: str) -> tuple[str, str, str | None]:
    """
    Split a collection or document path into its names.

    Returns:
        (database, collection, document_id); document_id is None for a
        collection path

    Raises:
        ValueError: If the path doesn't follow the resource layout
    """
    parts = path.split("/", 5)
    if (
        len(parts) not in (4, 6)
        or parts[0] != DATABASES_PATH_SEGMENT
        or parts[2] != COLLECTIONS_PATH_SEGMENT
        or (len(parts) == 6 and parts[4] != DOCUMENTS_PATH_SEGMENT)
    ):
        raise ValueError(f"Invalid resource path: {path}")

    document_id = parts[5] if len(parts) == 6 else None
    return parts[1], parts[3], document_id
