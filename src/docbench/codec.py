"""
Conversion between binding records and stored documents.

A record is a flat ``dict[str, str]`` plus the reserved ``id`` field holding
the record key. Values are stored as text; no field types are inferred.
"""

from __future__ import annotations

from typing import Any, Mapping

from docbench.client.base import Document

ID_FIELD = "id"


def to_text(value: Any) -> str:
    """Text form of a field value; bytes are decoded as UTF-8."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def decode(document: Document | None) -> dict[str, str]:
    """Record for a stored document, or an empty record if it is absent."""
    if document is None:
        return {}

    record = {ID_FIELD: document.id}
    for name, value in document.fields.items():
        record[name] = to_text(value)
    return record


def encode(key: str, record: Mapping[str, Any]) -> Document:
    """Document for ``record`` stored under ``key``; the key wins over any ``id`` in the record."""
    fields = {name: to_text(value) for name, value in record.items() if name != ID_FIELD}
    return Document(id=key, fields=fields)


def merge(document: Document, delta: Mapping[str, Any]) -> Document:
    """Copy of ``document`` with ``delta`` written over its fields."""
    fields = dict(document.fields)
    for name, value in delta.items():
        if name == ID_FIELD:
            continue
        fields[name] = to_text(value)

    return Document(id=document.id, fields=fields, etag=document.etag, path=document.path)
