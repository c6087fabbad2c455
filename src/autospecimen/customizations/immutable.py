from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import Any, get_args, get_origin

from autospecimen.customizations.registry import auto_register
from autospecimen.engine.base import NO_SPECIMEN, SpecimenEngine
from autospecimen.requests import strip_annotated


class ImmutableCollectionBuilder:
    def __init__(
        self,
        immutable_type: type,
        underlying_type: type,
        converter: Callable[[Any], Any],
    ) -> None:
        self.immutable_type = immutable_type
        self.underlying_type = underlying_type
        self.converter = converter

    def create(self, request: Any, context: SpecimenEngine) -> Any:
        base, _ = strip_annotated(request)
        if get_origin(base) is not self.immutable_type:
            return NO_SPECIMEN
        args = get_args(base)
        if not args:
            return NO_SPECIMEN
        mutable = context.resolve(self.underlying_type[args])
        return self.converter(mutable)


@auto_register
class ImmutableCollectionCustomization:
    """Build ``frozenset`` and ``MappingProxyType`` from their mutable counterparts."""

    def customize(self, engine: Any) -> None:
        engine.customizations.append(
            ImmutableCollectionBuilder(frozenset, set, frozenset)
        )
        engine.customizations.append(
            ImmutableCollectionBuilder(MappingProxyType, dict, MappingProxyType)
        )
