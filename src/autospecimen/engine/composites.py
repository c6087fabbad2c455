from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, get_origin, get_type_hints

from pydantic import BaseModel, ValidationError

from autospecimen.errors import ResolutionError

if TYPE_CHECKING:
    from autospecimen.engine.fixture import Fixture

_EMPTY = inspect.Parameter.empty
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def is_pydantic_model(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def build_instance(cls: type, engine: Fixture, overrides: Mapping[str, Any]) -> Any:
    if is_pydantic_model(cls):
        return _build_model(cls, engine, overrides)
    if dataclasses.is_dataclass(cls):
        return _build_dataclass(cls, engine, overrides)
    return _build_plain(cls, engine, overrides)


def _hints(cls: type, target: Any) -> dict[str, Any]:
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as exc:
        raise ResolutionError(cls, f"unresolvable type hints: {exc}") from exc


def _construct(cls: type, *args: Any, **kwargs: Any) -> Any:
    try:
        return cls(*args, **kwargs)
    except Exception as exc:
        raise ResolutionError(cls, f"constructor raised {type(exc).__name__}: {exc}") from exc


def _assign(cls: type, instance: Any, name: str, value: Any) -> None:
    try:
        setattr(instance, name, value)
    except (AttributeError, TypeError) as exc:
        raise ResolutionError(cls, f"member {name!r} is not writable") from exc


def _build_model(
    cls: type[BaseModel], engine: Fixture, overrides: Mapping[str, Any]
) -> BaseModel:
    payload: dict[str, Any] = {}
    for name, field in cls.model_fields.items():
        key = field.alias or name
        if name in overrides:
            payload[key] = overrides[name]
            continue
        annotation = field.annotation if field.annotation is not None else Any
        payload[key] = engine.resolve(annotation)
    try:
        return cls.model_validate(payload)
    except ValidationError as exc:
        raise ResolutionError(
            cls, f"generated values rejected by model ({exc.error_count()} errors)"
        ) from exc


def _build_dataclass(cls: type, engine: Fixture, overrides: Mapping[str, Any]) -> Any:
    hints = _hints(cls, cls)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        if field.name in overrides:
            kwargs[field.name] = overrides[field.name]
        else:
            kwargs[field.name] = engine.resolve(hints.get(field.name, Any))
    instance = _construct(cls, **kwargs)
    for name, value in overrides.items():
        if name not in kwargs:
            _assign(cls, instance, name, value)
    return instance


def _init_hints(cls: type) -> dict[str, Any]:
    init = getattr(cls, "__init__", object.__init__)
    if init is object.__init__ or not inspect.isfunction(init):
        return {}
    return _hints(cls, init)


def _build_plain(cls: type, engine: Fixture, overrides: Mapping[str, Any]) -> Any:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError) as exc:
        raise ResolutionError(cls, "constructor signature is not inspectable") from exc
    hints = _init_hints(cls)
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for param in signature.parameters.values():
        if param.kind in _VARIADIC:
            continue
        if param.name in overrides:
            value = overrides[param.name]
        else:
            annotation = hints.get(param.name, _EMPTY)
            if annotation is _EMPTY:
                if param.default is not _EMPTY:
                    continue
                raise ResolutionError(
                    cls, f"constructor parameter {param.name!r} has no annotation"
                )
            value = engine.resolve(annotation)
        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[param.name] = value
    instance = _construct(cls, *args, **kwargs)

    taken = set(signature.parameters)
    for name, annotation in _settable_members(cls, taken).items():
        value = overrides[name] if name in overrides else engine.resolve(annotation)
        _assign(cls, instance, name, value)
        taken.add(name)
    for name, value in overrides.items():
        if name not in taken:
            _assign(cls, instance, name, value)
    return instance


def _settable_members(cls: type, taken: set[str]) -> dict[str, Any]:
    # annotated class attributes with a class-level default, like settable properties
    members: dict[str, Any] = {}
    for name, annotation in _hints(cls, cls).items():
        if name.startswith("_") or name in taken:
            continue
        if annotation is ClassVar or get_origin(annotation) is ClassVar:
            continue
        try:
            attr = inspect.getattr_static(cls, name)
        except AttributeError:
            continue
        if isinstance(attr, property) and attr.fset is None:
            continue
        if callable(attr) and not isinstance(attr, property):
            continue
        members[name] = annotation
    return members
