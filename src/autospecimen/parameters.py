from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, get_type_hints

from autospecimen.declarations import CustomizeDeclaration
from autospecimen.errors import ResolutionError, require
from autospecimen.requests import strip_annotated

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: Any
    declarations: tuple[CustomizeDeclaration, ...] = field(default_factory=tuple)
    index: int = 0


def parameter_from_annotation(name: str, annotation: Any, index: int = 0) -> Parameter:
    base, metadata = strip_annotated(annotation)
    declarations = tuple(
        item for item in metadata if isinstance(item, CustomizeDeclaration)
    )
    return Parameter(name=name, annotation=base, declarations=declarations, index=index)


def parameters_from_callable(func: Callable[..., Any]) -> list[Parameter]:
    require(func, "func")
    signature = inspect.signature(func)
    try:
        hints = get_type_hints(func, include_extras=True)
    except (NameError, TypeError) as exc:
        raise ResolutionError(func, f"unresolvable parameter annotations: {exc}") from exc
    parameters: list[Parameter] = []
    for position, param in enumerate(signature.parameters.values()):
        if param.kind in _SKIPPED_KINDS:
            continue
        if position == 0 and param.name in {"self", "cls"} and param.name not in hints:
            continue
        if param.name not in hints:
            raise ResolutionError(
                func, "parameter has no type annotation", parameter=param.name
            )
        parameters.append(
            parameter_from_annotation(param.name, hints[param.name], len(parameters))
        )
    return parameters
