from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from autospecimen.declarations import CustomizeDeclaration
from autospecimen.engine.base import SpecimenEngine
from autospecimen.errors import ResolutionError, require
from autospecimen.parameters import Parameter
from autospecimen.requests import type_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectedDeclaration:
    declaration: CustomizeDeclaration
    parameter: Parameter
    position: int

    @property
    def priority(self) -> int:
        return self.declaration.priority


def collect_declarations(parameters: Sequence[Parameter]) -> list[CollectedDeclaration]:
    require(parameters, "parameters")
    collected: list[CollectedDeclaration] = []
    for parameter in parameters:
        for declaration in parameter.declarations:
            collected.append(
                CollectedDeclaration(
                    declaration=declaration,
                    parameter=parameter,
                    position=len(collected),
                )
            )
    # sorted() is stable, so equal priorities keep declaration order
    return sorted(collected, key=lambda item: item.priority)


def apply_customizations(
    parameters: Sequence[Parameter], engine: SpecimenEngine
) -> list[CollectedDeclaration]:
    require(engine, "engine")
    ordered = collect_declarations(parameters)
    for item in ordered:
        customization = item.declaration.get_customization(item.parameter)
        logger.debug(
            "apply customization parameter=%s priority=%s customization=%r",
            item.parameter.name,
            item.priority,
            customization,
        )
        customization.customize(engine)
    return ordered


def resolve_parameters(
    parameters: Sequence[Parameter], engine: SpecimenEngine
) -> list[Any]:
    require(parameters, "parameters")
    require(engine, "engine")
    values: list[Any] = []
    for parameter in parameters:
        try:
            values.append(engine.resolve(parameter.annotation))
        except ResolutionError as exc:
            if exc.parameter is not None:
                raise
            raise ResolutionError(
                parameter.annotation, str(exc), parameter=parameter.name
            ) from exc
    return values


class SpecimenDataGenerator:
    def __init__(self, engine: SpecimenEngine) -> None:
        self.engine = require(engine, "engine")

    def generate(self, parameters: Sequence[Parameter]) -> list[Any]:
        require(parameters, "parameters")
        if len(parameters) == 0:
            return []
        applied = apply_customizations(parameters, self.engine)
        values = resolve_parameters(parameters, self.engine)
        logger.debug(
            "generated parameters=%s customizations=%s types=%s",
            len(values),
            len(applied),
            [type_name(parameter.annotation) for parameter in parameters],
        )
        return values
