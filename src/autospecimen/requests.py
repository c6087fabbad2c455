from __future__ import annotations

import abc
import inspect
import typing
from typing import Annotated, Any, get_args, get_origin

ROOT_TYPES: frozenset[type] = frozenset({object, abc.ABC, typing.Generic, typing.Protocol})


def type_name(request: Any) -> str:
    if isinstance(request, type) and get_origin(request) is None:
        if request.__module__ == "builtins":
            return request.__qualname__
        return f"{request.__module__}.{request.__qualname__}"
    return repr(request)


def strip_annotated(request: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(request) is Annotated:
        base, *metadata = get_args(request)
        return base, tuple(metadata)
    return request, ()


def is_request_for(request: Any, cls: type) -> bool:
    base, _ = strip_annotated(request)
    return base is cls


def is_protocol_class(cls: Any) -> bool:
    return (
        isinstance(cls, type)
        and cls not in ROOT_TYPES
        and bool(getattr(cls, "_is_protocol", False))
    )


def is_interface(cls: Any) -> bool:
    if not isinstance(cls, type) or cls in ROOT_TYPES:
        return False
    return is_protocol_class(cls) or inspect.isabstract(cls)


def is_abstract_request(request: Any) -> bool:
    base, _ = strip_annotated(request)
    return isinstance(base, type) and get_origin(base) is None and is_interface(base)
