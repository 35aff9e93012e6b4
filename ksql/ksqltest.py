"""Helpers for filling dataclass records with fake database rows in unit tests.

Records are dataclasses whose database columns are declared with
:func:`column`; fields without a column name are ignored.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from collections.abc import Callable, Iterable, Mapping
from typing import Any

TAG = "ksql"
_NONE_TYPE = type(None)
_CO_VARARGS = 0x04
_CO_VARKEYWORDS = 0x08


class FillError(TypeError):
    """Raised when a record or a list of records cannot be filled."""


def column(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field stored under the database column ``name``.

    Further keyword arguments are passed on to :func:`dataclasses.field`.
    """
    if not name:
        raise ValueError("column name must not be empty")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def _describe(obj: Any) -> str:
    if isinstance(obj, type):
        return f"the class {obj.__name__}"
    return type(obj).__name__


def _is_dataclass_instance(obj: Any) -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def _is_dataclass_type(obj: Any) -> bool:
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


@functools.lru_cache(maxsize=None)
def _tag_info(cls: type) -> Mapping[str, dataclasses.Field]:
    by_column: dict[str, dataclasses.Field] = {}
    for field in dataclasses.fields(cls):
        name = field.metadata.get(TAG)
        if name is None:
            continue
        if name in by_column:
            raise ValueError(
                f"{cls.__name__} has two fields with the same ksql tag name: '{name}'"
            )
        by_column[name] = field
    if not by_column:
        raise ValueError(
            f"{cls.__name__} must have at least one field declared with a ksql column name"
        )
    return types.MappingProxyType(by_column)


@functools.lru_cache(maxsize=None)
def _field_types(cls: type) -> Mapping[str, Any]:
    # Annotations left as strings are not resolved; such fields take values as given.
    return types.MappingProxyType(
        {
            field.name: Any if isinstance(field.type, str) else field.type
            for field in dataclasses.fields(cls)
        }
    )


def _type_name(target: Any) -> str:
    if isinstance(target, type) and typing.get_origin(target) is None:
        return target.__name__
    return str(target)


def _is_union(target: Any) -> bool:
    origin = typing.get_origin(target)
    return origin is typing.Union or origin is types.UnionType


def _new_record(cls: type) -> Any:
    """Build an instance of ``cls`` with zero values for its required fields."""
    hints = _field_types(cls)
    kwargs = {
        field.name: _zero_value(hints[field.name])
        for field in dataclasses.fields(cls)
        if field.init
        and field.default is dataclasses.MISSING
        and field.default_factory is dataclasses.MISSING
    }
    return cls(**kwargs)


def _zero_value(target: Any) -> Any:
    if target is Any or target is object:
        return None
    if _is_union(target):
        members = typing.get_args(target)
        if _NONE_TYPE in members:
            return None
        return _zero_value(members[0])
    cls = typing.get_origin(target) or target
    if _is_dataclass_type(cls):
        return _new_record(cls)
    if isinstance(cls, type):
        try:
            return cls()
        except TypeError as err:
            raise FillError(f"no zero value for type {_type_name(target)}") from err
    return None


def _convert(value: Any, target: Any) -> Any:
    if target is Any or target is object:
        return value
    if _is_union(target):
        members = typing.get_args(target)
        options = [member for member in members if member is not _NONE_TYPE]
        if value is None:
            return None if len(options) < len(members) else _zero_value(options[0])
        for option in options:
            try:
                return _convert(value, option)
            except FillError:
                continue
        raise FillError(f"cannot convert {type(value).__name__} to {_type_name(target)}")
    if value is None:
        return _zero_value(target)
    cls = typing.get_origin(target) or target
    if not isinstance(cls, type):
        return value
    if isinstance(value, cls):
        return value
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if cls is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if cls is complex and is_number:
        return complex(value)
    raise FillError(f"cannot convert {type(value).__name__} to {_type_name(target)}")


def struct_to_map(obj: Any) -> dict[str, Any]:
    """Map the column names of a dataclass record to its values.

    Fields holding ``None`` are left out; other values, zero values
    included, are kept.
    """
    if not _is_dataclass_instance(obj):
        raise FillError(f"struct_to_map: expected a dataclass instance but got {_describe(obj)}")
    result = {}
    for name, field in _tag_info(type(obj)).items():
        value = getattr(obj, field.name)
        if value is not None:
            result[name] = value
    return result


def fill_struct_with(record: Any, db_row: Mapping[str, Any]) -> None:
    """Set the fields of ``record`` from a row mapping column names to values.

    Columns with no matching field are ignored, as are fields with no
    matching column. ``None`` sets optional fields to ``None`` and other
    fields to their zero value.
    """
    if not _is_dataclass_instance(record):
        raise FillError(
            "fill_struct_with: expected input to be a dataclass instance "
            f"but got {_describe(record)}"
        )
    cls = type(record)
    info = _tag_info(cls)
    hints = _field_types(cls)
    for column_name, raw in db_row.items():
        field = info.get(column_name)
        if field is None:
            continue
        try:
            setattr(record, field.name, _convert(raw, hints[field.name]))
        except (FillError, dataclasses.FrozenInstanceError) as err:
            raise FillError(
                f"fill_struct_with: error on field `{column_name}`: {err}"
            ) from err


def fill_slice_with(
    entities: list[Any], db_rows: Iterable[Mapping[str, Any]], record_type: type
) -> None:
    """Fill ``entities`` in place from ``db_rows``.

    Existing records are updated in order; new ``record_type`` records are
    appended for the rows beyond the end of the list.
    """
    if not isinstance(entities, list):
        raise FillError(
            "fill_slice_with: expected input to be a list of dataclass instances "
            f"but got {_describe(entities)}"
        )
    if not _is_dataclass_type(record_type):
        raise FillError(
            f"fill_slice_with: expected record_type to be a dataclass but got {_describe(record_type)}"
        )
    try:
        _tag_info(record_type)
        for idx, row in enumerate(db_rows):
            if idx >= len(entities):
                entities.append(_new_record(record_type))
            fill_struct_with(entities[idx], row)
    except (FillError, ValueError) as err:
        raise type(err)(f"fill_slice_with: {err}") from err


def _chunk_record_type(fn: Any) -> type:
    if not callable(fn):
        raise FillError(f"call_function_with_rows: expected a function but got {_describe(fn)}")
    bound = isinstance(fn, types.MethodType)
    func = fn.__func__ if bound else fn
    code = getattr(func, "__code__", None)
    if code is None:
        raise FillError(f"call_function_with_rows: expected a function but got {_describe(fn)}")
    skip = 1 if bound else 0
    positional_count = code.co_argcount - skip
    if (
        positional_count != 1
        or code.co_kwonlyargcount
        or code.co_flags & (_CO_VARARGS | _CO_VARKEYWORDS)
    ):
        raise FillError(
            "call_function_with_rows: expected a function with exactly one positional argument"
        )
    param_name = code.co_varnames[skip]
    annotation = getattr(func, "__annotations__", {}).get(param_name)
    args = typing.get_args(annotation)
    if typing.get_origin(annotation) is not list or len(args) != 1 or not _is_dataclass_type(args[0]):
        raise FillError(
            "call_function_with_rows: expected the argument to be annotated as "
            f"list[Record] with Record a dataclass, got {annotation!r}"
        )
    return args[0]


def call_function_with_rows(fn: Callable[[list[Any]], Any], rows: Iterable[Mapping[str, Any]]) -> Any:
    """Call a chunk callback with records built from ``rows``.

    The record type is taken from the ``list[Record]`` annotation of the
    callback's single argument. Returns what the callback returns; its
    exceptions propagate.
    """
    record_type = _chunk_record_type(fn)
    chunk: list[Any] = []
    fill_slice_with(chunk, rows, record_type)
    return fn(chunk)