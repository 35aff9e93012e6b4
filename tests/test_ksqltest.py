from dataclasses import dataclass

import pytest

from ksql.ksqltest import (
    FillError,
    call_function_with_rows,
    column,
    fill_slice_with,
    fill_struct_with,
    struct_to_map,
)


@dataclass
class S1:
    name: str = column("name_attr")
    age: int = column("age_attr")


@dataclass
class S2:
    name: str | None = column("name", default=None)
    age: int | None = column("age", default=None)


@dataclass
class Untagged:
    name: str = column("name_attr")
    age: int = column("age_attr")
    not_part_of_the_query: int = 0


@dataclass
class Duplicated:
    name: str = column("name_attr")
    duplicated_name: str = column("name_attr")
    age: int = column("age_attr")


@dataclass
class NoTags:
    name: str
    age: int


@dataclass
class User:
    name: str = column("name", default="")
    age: int = column("age", default=0)


@dataclass
class UserWithMissing:
    name: str = column("name", default="")
    age: int = column("age", default=0)
    missing: str = column("missing", default="")


@dataclass
class Person:
    name: str = column("name")
    age: int = column("age")


@dataclass
class Measure:
    value: float = column("value", default=0.0)


@dataclass(frozen=True)
class Frozen:
    name: str = column("name", default="")


def test_column_rejects_empty_name():
    with pytest.raises(ValueError):
        column("")


def test_struct_to_map_plain():
    assert struct_to_map(S1("my name", 22)) == {"name_attr": "my name", "age_attr": 22}


def test_struct_to_map_keeps_zero_values():
    assert struct_to_map(S1("", 0)) == {"name_attr": "", "age_attr": 0}


def test_struct_to_map_keeps_set_optional_values():
    assert struct_to_map(S2(name="", age=0)) == {"name": "", "age": 0}


def test_struct_to_map_ignores_none():
    assert struct_to_map(S2(name=None, age=None)) == {}


def test_struct_to_map_ignores_untagged_fields():
    assert struct_to_map(Untagged("fake-name", 42, 42)) == {"name_attr": "fake-name", "age_attr": 42}


def test_struct_to_map_duplicated_tags():
    with pytest.raises(ValueError, match="name_attr"):
        struct_to_map(Duplicated("fake-name", "fake-duplicated-name", 42))


def test_struct_to_map_no_tags():
    with pytest.raises(ValueError):
        struct_to_map(NoTags("fake-name", 42))


def test_struct_to_map_rejects_non_dataclass():
    with pytest.raises(FillError, match="struct_to_map"):
        struct_to_map({"name": "foo"})


def test_fill_struct_correctly():
    user = User()
    fill_struct_with(user, {"name": "Breno", "age": 22})
    assert user == User("Breno", 22)


def test_fill_optional_fields_with_values():
    user = S2()
    fill_struct_with(user, {"name": "Breno", "age": 22})
    assert user.name == "Breno"
    assert user.age == 22


def test_fill_optional_fields_with_none():
    user = S2(name="x", age=1)
    fill_struct_with(user, {"name": None, "age": None})
    assert user.name is None
    assert user.age is None


def test_none_becomes_zero_value():
    user = User("not empty", 42)
    fill_struct_with(user, {"name": None, "age": None})
    assert user.name == ""
    assert user.age == 0


def test_extra_or_missing_fields_are_ignored():
    user = UserWithMissing(missing="should be untouched")
    fill_struct_with(user, {"name": "fake name", "age": 42, "extra_field": "some value"})
    assert user == UserWithMissing("fake name", 42, "should be untouched")


def test_int_is_widened_to_float():
    measure = Measure()
    fill_struct_with(measure, {"value": 3})
    assert measure.value == 3.0
    assert isinstance(measure.value, float)


def test_fill_struct_rejects_class():
    with pytest.raises(FillError) as info:
        fill_struct_with(UserWithMissing, {"name": "fake name", "age": 42})
    message = str(info.value)
    for fragment in ("fill_struct_with", "expected input to be a dataclass instance", "UserWithMissing"):
        assert fragment in message


def test_fill_struct_rejects_list():
    with pytest.raises(FillError) as info:
        fill_struct_with([], {"name": "fake name"})
    message = str(info.value)
    for fragment in ("fill_struct_with", "expected input to be a dataclass instance", "list"):
        assert fragment in message


def test_fill_struct_incompatible_types():
    with pytest.raises(FillError) as info:
        fill_struct_with(User(), {"age": "not compatible with integer type"})
    message = str(info.value)
    for fragment in ("fill_struct_with", "age", "str", "int"):
        assert fragment in message


def test_fill_struct_frozen_record():
    with pytest.raises(FillError, match="name"):
        fill_struct_with(Frozen(), {"name": "Breno"})


def test_fill_slice_correctly():
    users = []
    fill_slice_with(users, [{"name": "Jorge"}, {"name": "Luciana"}, {"name": "Breno"}], Person)
    assert [user.name for user in users] == ["Jorge", "Luciana", "Breno"]
    assert all(user.age == 0 for user in users)


def test_fill_slice_updates_existing_records():
    existing = User("old", 5)
    users = [existing]
    fill_slice_with(users, [{"name": "Jorge"}, {"name": "Luciana"}], User)
    assert users[0] is existing
    assert users == [User("Jorge", 5), User("Luciana", 0)]


def test_fill_slice_rejects_non_list():
    with pytest.raises(FillError) as info:
        fill_slice_with((), [{"name": "Jorge"}], User)
    assert "fill_slice_with" in str(info.value)
    assert "expected input to be a list" in str(info.value)


def test_fill_slice_rejects_record_instead_of_list():
    with pytest.raises(FillError, match="fill_slice_with"):
        fill_slice_with(User(), [{"name": "Jorge"}], User)


def test_fill_slice_rejects_non_dataclass_type():
    with pytest.raises(FillError, match="record_type"):
        fill_slice_with([], [{"name": "Jorge"}], dict)


def test_fill_slice_reports_row_errors():
    with pytest.raises(FillError) as info:
        fill_slice_with([], [{"age": "nope"}], User)
    assert str(info.value).startswith("fill_slice_with: fill_struct_with")


def test_call_function_with_rows():
    def fn(users: list[User]):
        return list(users)

    result = call_function_with_rows(fn, [{"name": "fake-name1", "age": 42}, {"name": "fake-name2", "age": 43}])
    assert result == [User("fake-name1", 42), User("fake-name2", 43)]


def test_call_function_with_rows_returns_result():
    def fn(users: list[User]):
        return len(users)

    assert call_function_with_rows(fn, [{"name": "a"}, {"name": "b"}]) == 2


def test_call_function_with_rows_forwards_errors():
    def fn(users: list[User]):
        raise RuntimeError("fake-error-msg")

    with pytest.raises(RuntimeError, match="fake-error-msg"):
        call_function_with_rows(fn, [{"name": "fake-name1", "age": 42}])


def _two_args(first: list[User], second: list[User]):
    return None


def _str_arg(value: str):
    return None


def _list_of_str(values: list[str]):
    return None


def _no_annotation(values):
    return None


@pytest.mark.parametrize(
    "fn",
    [None, "not a function", lambda: None, _two_args, _str_arg, _list_of_str, _no_annotation],
)
def test_call_function_with_rows_invalid_function(fn):
    with pytest.raises(FillError, match="call_function_with_rows"):
        call_function_with_rows(fn, [{"name": "fake-name1", "age": 42}])