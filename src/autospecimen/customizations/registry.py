from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Literal, TypeVar

from pydantic import BaseModel

from autospecimen.config import default_settings
from autospecimen.errors import UnsupportedCustomizationKind, require

if TYPE_CHECKING:
    from autospecimen.engine.fixture import Fixture

ENTRY_POINT_GROUP = "autospecimen.customizations"

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

CustomizationKind = Literal["customization", "builder"]


class RegistrationRecord(BaseModel):
    name: str
    module: str
    kind: CustomizationKind
    source: Literal["explicit", "entry_point"]


def customization_kind(cls: type) -> CustomizationKind:
    if callable(getattr(cls, "customize", None)):
        return "customization"
    if callable(getattr(cls, "create", None)):
        return "builder"
    raise UnsupportedCustomizationKind(cls)


class CustomizationRegistry:
    """Process-wide list of customization types applied to every factory fixture.

    Types are registered explicitly (``register`` / ``@auto_register``) and, when
    enabled, discovered from the ``autospecimen.customizations`` entry-point
    group. ``discover`` computes the snapshot once under a lock and publishes it;
    later calls return the same tuple.
    """

    def __init__(
        self,
        *,
        group: str = ENTRY_POINT_GROUP,
        discover_entry_points: bool | None = None,
    ) -> None:
        self.group = group
        self.discover_entry_points = discover_entry_points
        self._lock = threading.Lock()
        self._explicit: list[type] = []
        self._sources: dict[type, Literal["explicit", "entry_point"]] = {}
        self._published: tuple[type, ...] | None = None

    @property
    def published(self) -> bool:
        return self._published is not None

    def register(self, cls: T) -> T:
        require(cls, "cls")
        customization_kind(cls)
        with self._lock:
            if cls in self._sources:
                return cls
            self._explicit.append(cls)
            self._sources[cls] = "explicit"
            if self._published is not None:
                logger.warning(
                    "customization %s registered after discovery; not applied",
                    cls.__qualname__,
                )
        return cls

    def discover(self) -> tuple[type, ...]:
        published = self._published
        if published is not None:
            return published
        with self._lock:
            if self._published is None:
                found = list(self._explicit)
                if self._entry_points_enabled():
                    for entry_point in entry_points(group=self.group):
                        loaded = entry_point.load()
                        customization_kind(loaded)
                        if loaded not in self._sources:
                            self._sources[loaded] = "entry_point"
                            found.append(loaded)
                self._published = tuple(found)
                logger.info(
                    "customization discovery complete group=%s types=%s",
                    self.group,
                    len(found),
                )
            return self._published

    def _entry_points_enabled(self) -> bool:
        if self.discover_entry_points is not None:
            return self.discover_entry_points
        return default_settings().discover_entry_points

    def records(self) -> list[RegistrationRecord]:
        return [
            RegistrationRecord(
                name=cls.__qualname__,
                module=cls.__module__,
                kind=customization_kind(cls),
                source=self._sources.get(cls, "explicit"),
            )
            for cls in self.discover()
        ]


default_registry = CustomizationRegistry()


def auto_register(cls: T) -> T:
    return default_registry.register(cls)


class AutoRegisterCustomization:
    def __init__(
        self,
        types: Sequence[type] | None = None,
        *,
        registry: CustomizationRegistry | None = None,
    ) -> None:
        self.types = None if types is None else tuple(types)
        self.registry = registry or default_registry

    def customize(self, engine: Fixture) -> None:
        require(engine, "engine")
        kinds = self.types if self.types is not None else self.registry.discover()
        for cls in kinds:
            category = customization_kind(cls)
            instance = cls()
            if category == "customization":
                instance.customize(engine)
            else:
                engine.customizations.append(instance)
            logger.debug(
                "auto register applied type=%s kind=%s", cls.__qualname__, category
            )
