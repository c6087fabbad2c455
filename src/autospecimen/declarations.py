from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from autospecimen.engine.base import Customization
from autospecimen.errors import require
from autospecimen.freeze import FreezeOnMatchCustomization
from autospecimen.matching import Matching

if TYPE_CHECKING:
    from autospecimen.parameters import Parameter


class CustomizeDeclaration(ABC):
    """Per-parameter customization attached through ``typing.Annotated``.

    Subclasses produce the customization to apply for a parameter. Lower
    ``priority`` values are applied first; equal priorities keep declaration
    order.
    """

    def __init__(self, *, priority: int = 0) -> None:
        self.priority = priority

    @abstractmethod
    def get_customization(self, parameter: Parameter) -> Customization:
        ...


class Frozen(CustomizeDeclaration):
    def __init__(
        self, matching: Matching = Matching.EXACT_TYPE, *, priority: int = 0
    ) -> None:
        super().__init__(priority=priority)
        self.matching = matching

    def get_customization(self, parameter: Parameter) -> Customization:
        require(parameter, "parameter")
        return FreezeOnMatchCustomization(parameter.annotation, self.matching)

    def __repr__(self) -> str:
        return f"Frozen({self.matching.name}, priority={self.priority})"
