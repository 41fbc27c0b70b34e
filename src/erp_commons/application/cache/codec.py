"""Application cache – JSON codec for cached DTOs, lists and pages.

Decoding is driven by the target type: dataclass fields are rebuilt from
their type hints, so ``PageResult[CompanyDto]`` or ``list[UserDto]`` come
back as real objects rather than dicts.
"""
from __future__ import annotations

import dataclasses
import enum
import functools
import json
import types
import typing
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar, Union
from uuid import UUID

from erp_commons.kernel.errors import SerializationError

__all__ = ["JsonCacheCodec"]

T = TypeVar("T")

_SEQUENCES = (list, tuple, set, frozenset)


class JsonCacheCodec:
    """Encode values to compact UTF-8 JSON and decode them into a target type."""

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(
                value,
                default=_to_json,
                separators=(",", ":"),
                ensure_ascii=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot encode {type(value).__name__} for the cache",
                payload_type=type(value).__name__,
                cause=exc,
            ) from exc

    def decode(self, data: bytes | str, into: Any) -> Any:
        try:
            return _build(json.loads(data), into)
        except (TypeError, ValueError, KeyError, AttributeError, InvalidOperation) as exc:
            name = getattr(into, "__name__", repr(into))
            raise SerializationError(
                f"Cannot decode cached payload as {name}",
                payload_type=name,
                cause=exc,
            ) from exc


def _to_json(value: Any) -> Any:  # noqa: PLR0911
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@functools.cache
def _hints(cls: type) -> dict[str, Any]:
    return typing.get_type_hints(cls)


def _substitute(hint: Any, bindings: dict[Any, Any]) -> Any:
    if isinstance(hint, TypeVar):
        return bindings.get(hint, Any)
    args = typing.get_args(hint)
    if not args or not bindings:
        return hint
    new_args = tuple(_substitute(a, bindings) for a in args)
    origin = typing.get_origin(hint)
    if origin in (Union, types.UnionType):
        return Union[new_args]
    return origin[new_args]


def _build(raw: Any, tp: Any) -> Any:  # noqa: PLR0911, PLR0912
    if raw is None or tp is Any or tp is object:
        return raw

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in (Union, types.UnionType):
        candidates = [a for a in args if a is not type(None)]
        if len(candidates) == 1:
            return _build(raw, candidates[0])
        return raw

    if origin in _SEQUENCES or tp in _SEQUENCES:
        if not isinstance(raw, list):
            raise TypeError(f"expected a JSON array for {tp!r}")
        container = origin or tp
        if container is tuple and len(args) == 2 and args[1] is Ellipsis:
            item_type = args[0]
        else:
            item_type = args[0] if args else Any
        return container(_build(item, item_type) for item in raw)

    if origin is dict or tp is dict:
        if not isinstance(raw, dict):
            raise TypeError(f"expected a JSON object for {tp!r}")
        value_type = args[1] if len(args) == 2 else Any
        return {key: _build(value, value_type) for key, value in raw.items()}

    target = origin or tp
    if dataclasses.is_dataclass(target):
        if not isinstance(raw, dict):
            raise TypeError(f"expected a JSON object for {target.__name__}")
        bindings = dict(zip(getattr(target, "__parameters__", ()), args))
        hints = _hints(target)
        kwargs = {
            f.name: _build(raw[f.name], _substitute(hints.get(f.name, Any), bindings))
            for f in dataclasses.fields(target)
            if f.init and f.name in raw
        }
        return target(**kwargs)

    if isinstance(target, type):
        if issubclass(target, enum.Enum):
            return target(raw)
        if target is UUID:
            if not isinstance(raw, str):
                raise TypeError(f"expected a UUID string, got {type(raw).__name__}")
            return UUID(raw)
        if target is datetime:
            return datetime.fromisoformat(raw)
        if target is date:
            return date.fromisoformat(raw)
        if target is Decimal:
            return Decimal(raw)
        if target is float and isinstance(raw, int):
            return float(raw)
    return raw
