from __future__ import annotations

import logging
import random
import types
from collections.abc import (
    Callable,
    Collection,
    Iterable,
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Sequence,
)
from collections.abc import Set as AbstractSet
from typing import Any, Literal, TypeVar, Union, get_args, get_origin

from autospecimen.config import FixtureSettings, default_settings
from autospecimen.engine.base import NO_SPECIMEN, Customization, SpecimenBuilder
from autospecimen.engine.composites import build_instance
from autospecimen.engine.primitives import create_primitive
from autospecimen.errors import ResolutionError, require
from autospecimen.freeze import FreezeOnMatchCustomization
from autospecimen.matching import Matching
from autospecimen.requests import is_abstract_request, strip_annotated, type_name

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (list, Sequence, MutableSequence, Iterable, Collection)
_SET_ORIGINS = (set, MutableSet, AbstractSet)
_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)
_BARE_CONTAINERS = (list, set, dict, tuple)


class FactoryBuilder:
    def __init__(self, request: Any, factory: Callable[[Fixture], Any]) -> None:
        self.request, _ = strip_annotated(require(request, "request"))
        self.factory = require(factory, "factory")

    def create(self, request: Any, context: Fixture) -> Any:
        if request != self.request:
            return NO_SPECIMEN
        return self.factory(context)


class Fixture:
    """Specimen engine with a per-instance pin table.

    ``resolve`` consults, in order: pinned instances, ``customizations``
    builders, the built-in generators, then ``residue`` builders (fallbacks such
    as mock substitution). Pins are first-wins and last for the lifetime of the
    fixture, so they also take precedence over later ``register`` calls.
    """

    def __init__(self, settings: FixtureSettings | None = None) -> None:
        self.settings = settings or default_settings()
        self.customizations: list[SpecimenBuilder] = []
        self.residue: list[SpecimenBuilder] = []
        self._pins: dict[Any, Any] = {}
        self._overrides: dict[type, dict[str, Any]] = {}
        self._building: list[Any] = []
        self._rng = random.Random(self.settings.seed)

    def customize(self, customization: Customization) -> Fixture:
        require(customization, "customization")
        customization.customize(self)
        return self

    def register(self, request: Any, factory: Callable[[Fixture], Any]) -> Fixture:
        builder = FactoryBuilder(request, factory)
        if self.is_pinned(builder.request):
            logger.warning(
                "register has no effect, type already pinned type=%s", type_name(builder.request)
            )
        self.customizations.insert(0, builder)
        return self

    def customize_type(self, cls: type, **values: Any) -> Fixture:
        require(cls, "cls")
        self._overrides.setdefault(cls, {}).update(values)
        return self

    def pin(self, request: Any, instance: Any) -> None:
        key, _ = strip_annotated(require(request, "request"))
        existing = self._lookup_pin(key)
        if existing is not NO_SPECIMEN:
            if existing is not instance:
                logger.debug("pin kept existing instance type=%s", type_name(key))
            return
        self._pins[key] = instance
        logger.debug("pin type=%s", type_name(key))

    def inject(self, request: Any, instance: Any) -> None:
        key, _ = strip_annotated(require(request, "request"))
        existing = self._lookup_pin(key)
        if existing is not NO_SPECIMEN and existing is not instance:
            logger.warning("inject ignored, type already pinned type=%s", type_name(key))
            return
        self.pin(key, instance)

    def is_pinned(self, request: Any) -> bool:
        key, _ = strip_annotated(request)
        return self._lookup_pin(key) is not NO_SPECIMEN

    def freeze(self, request: Any, matching: Matching = Matching.EXACT_TYPE) -> Any:
        FreezeOnMatchCustomization(request, matching).customize(self)
        return self.resolve(request)

    def create(self, request: Any) -> Any:
        return self.resolve(request)

    def create_many(self, request: Any, count: int | None = None) -> list[Any]:
        total = self.settings.repeat_count if count is None else count
        return [self.resolve(request) for _ in range(total)]

    def resolve(self, request: Any) -> Any:
        request, _ = strip_annotated(require(request, "request"))
        pinned = self._lookup_pin(request)
        if pinned is not NO_SPECIMEN:
            return pinned
        if self._is_building(request):
            raise ResolutionError(request, "circular reference in object graph")
        if len(self._building) >= self.settings.max_depth:
            raise ResolutionError(
                request, f"object graph deeper than {self.settings.max_depth}"
            )
        self._building.append(request)
        try:
            return self._create(request)
        finally:
            self._building.pop()

    def _create(self, request: Any) -> Any:
        for builder in self.customizations:
            specimen = builder.create(request, self)
            if specimen is not NO_SPECIMEN:
                return specimen
        specimen = self._create_builtin(request)
        if specimen is not NO_SPECIMEN:
            return specimen
        for builder in self.residue:
            specimen = builder.create(request, self)
            if specimen is not NO_SPECIMEN:
                return specimen
        if is_abstract_request(request):
            raise ResolutionError(
                request,
                "abstract type has no generation strategy and no mock substitute",
            )
        raise ResolutionError(request, "no generation strategy")

    def _create_builtin(self, request: Any) -> Any:
        specimen = create_primitive(request, self._rng)
        if specimen is not NO_SPECIMEN:
            return specimen
        origin = get_origin(request)
        args = get_args(request)
        if origin is Literal:
            return self._rng.choice(args)
        if origin is Union or origin is types.UnionType:
            return self._create_union(args)
        if origin is type:
            return args[0] if args else NO_SPECIMEN
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(self.create_many(args[0]))
            return tuple(self.resolve(arg) for arg in args)
        if origin in _SEQUENCE_ORIGINS:
            return self.create_many(args[0]) if args else []
        if origin in _SET_ORIGINS:
            return set(self.create_many(args[0])) if args else set()
        if origin in _MAPPING_ORIGINS:
            if not args:
                return {}
            key_type, value_type = args
            return {
                self.resolve(key_type): self.resolve(value_type)
                for _ in range(self.settings.repeat_count)
            }
        if request in _BARE_CONTAINERS:
            return request()
        if hasattr(request, "__supertype__"):
            return self.resolve(request.__supertype__)
        if isinstance(request, TypeVar) or origin is not None:
            return NO_SPECIMEN
        if isinstance(request, type) and not is_abstract_request(request):
            logger.debug("build composite type=%s", type_name(request))
            return build_instance(request, self, self._overrides.get(request, {}))
        return NO_SPECIMEN

    def _create_union(self, args: tuple[Any, ...]) -> Any:
        members = [arg for arg in args if arg is not type(None)]
        if not members:
            return None
        first = members[0]
        if len(members) < len(args) and self._is_building(strip_annotated(first)[0]):
            return None
        return self.resolve(first)

    def _lookup_pin(self, request: Any) -> Any:
        try:
            return self._pins.get(request, NO_SPECIMEN)
        except TypeError:
            return NO_SPECIMEN

    def _is_building(self, request: Any) -> bool:
        try:
            return request in self._building
        except TypeError:
            return False
