"""Populate dataclass fields from a mapping of fetched values by key."""

from __future__ import annotations

import copy
import dataclasses
import types
from typing import Any, Union, get_args, get_origin

FETCHER_KEY = "fetcher_key"


def fetcher_field(key: str, default: Any = dataclasses.MISSING) -> Any:
    """Declare a dataclass field that is filled from ``result[key]``."""
    metadata = {FETCHER_KEY: key}
    if isinstance(default, (list, dict, set)):
        template = default
        return dataclasses.field(default_factory=lambda: copy.copy(template), metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


def _matches_name(value: Any, expected: str) -> bool:
    """Match a value against an annotation that was left as text."""
    base = expected.split("[", 1)[0].strip()
    if base in ("Any", "typing.Any"):
        return True
    if base == "None":
        return value is None
    return type(value).__name__ == base.rsplit(".", 1)[-1]


def _matches(value: Any, expected: Any) -> bool:
    if expected is Any:
        return True
    if isinstance(expected, str):
        return _matches_name(value, expected)
    if expected is None or expected is type(None):
        return value is None
    origin = get_origin(expected)
    args = get_args(expected)
    if origin is Union or origin is types.UnionType:
        return any(_matches(value, arg) for arg in args)
    if origin is None:
        return isinstance(expected, type) and type(value) is expected
    if type(value) is not origin:
        return False
    if not args:
        return True
    if origin in (list, set, frozenset):
        return all(_matches(item, args[0]) for item in value)
    if origin is dict:
        key_type, value_type = args
        return all(_matches(k, key_type) and _matches(v, value_type) for k, v in value.items())
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return all(_matches(item, args[0]) for item in value)
        return len(args) == len(value) and all(_matches(v, t) for v, t in zip(value, args))
    return True


def _type_name(expected: Any) -> str:
    if isinstance(expected, str):
        return expected
    if get_origin(expected) is None and isinstance(expected, type):
        return expected.__name__
    return repr(expected)


def _field_type(target: Any, name: str) -> Any:
    if dataclasses.is_dataclass(target) and not isinstance(target, type):
        for field in dataclasses.fields(target):
            if field.name == name:
                return field.type
    raise AttributeError(f"{type(target).__name__} has no field {name}")


def set_value_on_field(target: Any, name: str, value: Any) -> None:
    """Set ``target.name`` to ``value`` if the value has exactly the field's declared type."""
    expected = _field_type(target, name)
    if not _matches(value, expected):
        raise TypeError(
            f"incoming value {value!r} with type {type(value).__name__} "
            f"not of expected type {_type_name(expected)}"
        )
    setattr(target, name, value)


def unmarshal(result: dict[str, Any], target: Any) -> None:
    """Fill the keyed fields of the dataclass ``target`` from ``result``.

    Fields without a fetcher key are left alone, and keys in ``result`` with
    no matching field are ignored.
    """
    if not dataclasses.is_dataclass(target) or isinstance(target, type):
        raise TypeError("unmarshal target must be a dataclass instance")
    for field in dataclasses.fields(target):
        key = field.metadata.get(FETCHER_KEY)
        if not key or key not in result:
            continue
        try:
            set_value_on_field(target, field.name, result[key])
        except TypeError as err:
            raise TypeError(f"failed to set value on field {key}: {err}") from err