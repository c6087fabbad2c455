from __future__ import annotations

from typing import Any, Final, Protocol, runtime_checkable


class _NoSpecimen:
    _instance: _NoSpecimen | None = None

    def __new__(cls) -> _NoSpecimen:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_SPECIMEN"

    def __bool__(self) -> bool:
        return False


NO_SPECIMEN: Final = _NoSpecimen()


@runtime_checkable
class SpecimenEngine(Protocol):
    def resolve(self, request: Any) -> Any:
        ...

    def pin(self, request: Any, instance: Any) -> None:
        ...


@runtime_checkable
class Customization(Protocol):
    def customize(self, engine: Any) -> None:
        ...


@runtime_checkable
class SpecimenBuilder(Protocol):
    def create(self, request: Any, context: SpecimenEngine) -> Any:
        ...
