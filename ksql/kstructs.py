"""Deprecated aliases of the helpers in :mod:`ksql.ksqltest`."""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ksql import ksqltest


def _warn(name: str) -> None:
    warnings.warn(
        f"ksql.kstructs.{name} is deprecated, use ksql.ksqltest.{name} instead",
        DeprecationWarning,
        stacklevel=3,
    )


def struct_to_map(obj: Any) -> dict[str, Any]:
    """Deprecated: use :func:`ksql.ksqltest.struct_to_map`."""
    _warn("struct_to_map")
    return ksqltest.struct_to_map(obj)


def fill_struct_with(record: Any, db_row: Mapping[str, Any]) -> None:
    """Deprecated: use :func:`ksql.ksqltest.fill_struct_with`."""
    _warn("fill_struct_with")
    ksqltest.fill_struct_with(record, db_row)


def fill_slice_with(
    entities: list[Any], db_rows: Iterable[Mapping[str, Any]], record_type: type
) -> None:
    """Deprecated: use :func:`ksql.ksqltest.fill_slice_with`."""
    _warn("fill_slice_with")
    ksqltest.fill_slice_with(entities, db_rows, record_type)


def call_function_with_rows(fn: Callable[[list[Any]], Any], rows: Iterable[Mapping[str, Any]]) -> Any:
    """Deprecated: use :func:`ksql.ksqltest.call_function_with_rows`."""
    _warn("call_function_with_rows")
    return ksqltest.call_function_with_rows(fn, rows)