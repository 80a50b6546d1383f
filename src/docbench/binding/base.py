"""Base binding interface driven by the load-generation harness."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping


class Status(str, Enum):
    """Outcome reported to the harness for one operation."""

    OK = "OK"
    ERROR = "ERROR"

    @property
    def is_ok(self) -> bool:
        return self is Status.OK


class Binding(ABC):
    """
    Abstract base class for database bindings.

    The harness calls ``init()`` once per binding instance, then the five
    operations from many threads, then ``cleanup()``. Results are written into
    the container the harness passes in.
    """

    def init(self) -> None:
        """Initialize the binding. Raises ConfigurationError on bad settings."""
        pass

    def cleanup(self) -> None:
        """Release resources."""
        pass

    @abstractmethod
    def read(
        self, table: str, key: str, fields: set[str] | None, result: dict[str, str]
    ) -> Status:
        """
        Read a single record.

        Args:
            table: Table name
            key: Record key
            fields: Fields to read, or None for all
            result: Filled with the record's field/value pairs

        Returns:
            Status of the operation
        """
        ...

    @abstractmethod
    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None,
        result: list[dict[str, str]],
    ) -> Status:
        """
        Read ``record_count`` records in key order starting at ``start_key``.

        Args:
            result: One field/value mapping is appended per record
        """
        ...

    @abstractmethod
    def update(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        """Write ``values`` over the fields of an existing record."""
        ...

    @abstractmethod
    def insert(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        """Insert a new record."""
        ...

    @abstractmethod
    def delete(self, table: str, key: str) -> Status:
        """Delete a record."""
        ...
