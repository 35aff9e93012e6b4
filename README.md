# ksql

This package helps you unit-test code that uses a database through a small
provider interface. The interface has these operations: `insert`, `patch`,
`delete`, `update`, `query`, `query_one`, `query_chunks`, `exec` and
`transaction`.

## Mocking a provider

`ksql.mocks.Mock` is a dataclass. Each operation has a matching `*_fn`
attribute, such as `insert_fn` or `query_fn`. When you call an operation,
the mock passes the call to that callable and returns its result. To report
an error, make the callable raise.

If an operation is called and its callable is not set, it raises
`ksql.mocks.MockNotSetError`. The error message names the call and the
attribute that is missing. `transaction` works differently: when
`transaction_fn` is not set, it calls the given function and passes the
mock itself as the database.

```python
from ksql.mocks import Mock, new_mock_result

inserted = []

db = Mock(insert_fn=lambda table, record: inserted.append(record))
db.insert("users", {"name": "Ana"})
assert inserted == [{"name": "Ana"}]

db = Mock(exec_fn=lambda query, *args: new_mock_result(42, 1))
result = db.exec("DELETE FROM users WHERE id = ?", 42)
assert result.rows_affected() == 1
assert result.last_insert_id() == 42
```

`Mock.set_fallback_database(db)` returns a new mock and leaves the original
unchanged. In the new mock, every `*_fn` that was not set is replaced by the
matching method of `db`. This lets you override only a few operations of
another provider.

`MockResult` has two methods, `last_insert_id()` and `rows_affected()`.
Each one calls `last_insert_id_fn` or `rows_affected_fn`, and raises
`MockNotSetError` if that callable is not set.
`new_mock_result(last_insert_id, rows_affected)` builds a `MockResult` that
always returns the two values you give it.

## Filling records from rows

`ksql.ksqltest` works with dataclasses. To map a field to a database column,
declare it with `column(name, **field_kwargs)`. Any extra keyword arguments
are passed on to `dataclasses.field`. Fields declared without `column` are
ignored.

```python
from dataclasses import dataclass
from ksql.ksqltest import column, struct_to_map, fill_struct_with, fill_slice_with

@dataclass
class User:
    name: str = column("name", default="")
    age: int = column("age", default=0)

user = User()
fill_struct_with(user, {"name": "Breno", "age": 22, "extra": "ignored"})
assert struct_to_map(user) == {"name": "Breno", "age": 22}

users: list[User] = []
fill_slice_with(users, [{"name": "Jorge"}, {"name": "Luciana"}], User)
assert [u.name for u in users] == ["Jorge", "Luciana"]
```

- **`struct_to_map(obj)`** maps column names to field values. Fields that
  hold `None` are left out; zero values are kept.
  - It raises `ValueError` if two fields share a column name, or if no field
    has one.
- **`fill_struct_with(record, db_row)`** sets fields from a row.
  - Columns that have no field are ignored, and fields that have no column
    are left untouched.
  - A `None` value sets an `Optional` field to `None`. For any other field
    type, `None` sets the field to that type's zero value.
  - An `int` is accepted for a `float` field.
  - Any other value whose type does not match the field raises
    `ksql.ksqltest.FillError`.
- **`fill_slice_with(entities, db_rows, record_type)`** updates the records
  already in the list, in order. For each row past the end of the list, it
  appends a new `record_type` record.
- **`call_function_with_rows(fn, rows)`** is meant for testing
  `query_chunks` callbacks.
  - `fn` must take exactly one positional argument, annotated as
    `list[Record]`, where `Record` is a dataclass. The annotation must be a
    real type, not a string. This means it will not work in a module that
    uses `from __future__ import annotations`.
  - It builds the records from `rows`, calls `fn` with them and returns what
    `fn` returns.

`ksql.kstructs` provides the same four functions under an older name. Each
call there emits a `DeprecationWarning` and then runs the matching function
in `ksql.ksqltest`.

## Sequences

`ksql.slices.to_interface_slice(value)` returns the items of a sequence as a
new list. An object that implements the `ToInterfaceSlicer` protocol is
converted by its own `to_interface_slice()` method. Strings and
non-sequences raise `TypeError`.

## What this package does not do

This package does not contain a database provider. It does not connect to
any database, and it does not build or run SQL. `Mock` only forwards calls
to the callables you give it, or to the provider you pass to
`set_fallback_database`.

## Running the tests

```
pip install -e ".[test]"
pytest
```