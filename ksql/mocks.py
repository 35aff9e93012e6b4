"""Configurable test doubles for a ksql database provider."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Optional

_Fn = Optional[Callable[..., Any]]

_PROVIDER_METHODS = {
    "insert_fn": "insert",
    "patch_fn": "patch",
    "delete_fn": "delete",
    "update_fn": "update",
    "query_fn": "query",
    "query_one_fn": "query_one",
    "query_chunks_fn": "query_chunks",
    "exec_fn": "exec",
    "transaction_fn": "transaction",
}


class MockNotSetError(RuntimeError):
    """Raised when a mocked operation is called but its behaviour was never set."""


@dataclass
class Mock:
    """A provider whose every operation is delegated to a user supplied callable.

    Set only the ``*_fn`` attributes a test needs; calling an operation whose
    callable is unset raises :class:`MockNotSetError`, except ``transaction``,
    which then simply runs the given function with the mock itself.
    Errors are reported by letting the callables raise.
    """

    insert_fn: _Fn = None
    patch_fn: _Fn = None
    delete_fn: _Fn = None
    update_fn: _Fn = None
    query_fn: _Fn = None
    query_one_fn: _Fn = None
    query_chunks_fn: _Fn = None
    exec_fn: _Fn = None
    transaction_fn: _Fn = None

    def set_fallback_database(self, db: Any) -> "Mock":
        """Return a copy whose unset operations are delegated to ``db``."""
        fallbacks = {
            attr: getattr(db, method)
            for attr, method in _PROVIDER_METHODS.items()
            if getattr(self, attr) is None
        }
        return dataclasses.replace(self, **fallbacks)

    def _require(self, attr: str, call: str) -> Callable[..., Any]:
        fn = getattr(self, attr)
        if fn is None:
            raise MockNotSetError(
                f"ksql.Mock.{call} called but ksql.Mock.{attr} is not set"
            )
        return fn

    def insert(self, table: Any, record: Any) -> Any:
        """Delegate to ``insert_fn``."""
        fn = self._require("insert_fn", f"insert({table!r}, {record!r})")
        return fn(table, record)

    def patch(self, table: Any, record: Any) -> Any:
        """Delegate to ``patch_fn``."""
        fn = self._require("patch_fn", f"patch({table!r}, {record!r})")
        return fn(table, record)

    def delete(self, table: Any, id_or_record: Any) -> Any:
        """Delegate to ``delete_fn``."""
        fn = self._require("delete_fn", f"delete({table!r}, {id_or_record!r})")
        return fn(table, id_or_record)

    def update(self, table: Any, record: Any) -> Any:
        """Delegate to ``update_fn``."""
        fn = self._require("update_fn", f"update({table!r}, {record!r})")
        return fn(table, record)

    def query(self, records: Any, query: str, *args: Any) -> Any:
        """Delegate to ``query_fn``."""
        fn = self._require("query_fn", f"query({records!r}, {query!r}, {list(args)!r})")
        return fn(records, query, *args)

    def query_one(self, record: Any, query: str, *args: Any) -> Any:
        """Delegate to ``query_one_fn``."""
        fn = self._require(
            "query_one_fn", f"query_one({record!r}, {query!r}, {list(args)!r})"
        )
        return fn(record, query, *args)

    def query_chunks(self, parser: Any) -> Any:
        """Delegate to ``query_chunks_fn``."""
        fn = self._require("query_chunks_fn", f"query_chunks({parser!r})")
        return fn(parser)

    def exec(self, query: str, *args: Any) -> Any:
        """Delegate to ``exec_fn`` and return the result it produces."""
        fn = self._require("exec_fn", f"exec({query!r}, {list(args)!r})")
        return fn(query, *args)

    def transaction(self, fn: Callable[[Any], Any]) -> Any:
        """Delegate to ``transaction_fn``, or run ``fn`` with this mock if unset."""
        if self.transaction_fn is None:
            return fn(self)
        return self.transaction_fn(fn)


@dataclass
class MockResult:
    """A result of ``exec`` whose values come from user supplied callables."""

    last_insert_id_fn: Optional[Callable[[], int]] = None
    rows_affected_fn: Optional[Callable[[], int]] = None

    def last_insert_id(self) -> int:
        """Return the value produced by ``last_insert_id_fn``."""
        if self.last_insert_id_fn is None:
            raise MockNotSetError(
                "ksql.MockResult.last_insert_id() called but "
                "ksql.MockResult.last_insert_id_fn is not set"
            )
        return self.last_insert_id_fn()

    def rows_affected(self) -> int:
        """Return the value produced by ``rows_affected_fn``."""
        if self.rows_affected_fn is None:
            raise MockNotSetError(
                "ksql.MockResult.rows_affected() called but "
                "ksql.MockResult.rows_affected_fn is not set"
            )
        return self.rows_affected_fn()


def new_mock_result(last_insert_id: int, rows_affected: int) -> MockResult:
    """Build a :class:`MockResult` that always returns the given values."""
    return MockResult(
        last_insert_id_fn=lambda: last_insert_id,
        rows_affected_fn=lambda: rows_affected,
    )