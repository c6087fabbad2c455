from __future__ import annotations

from typing import Any


class SpecimenError(Exception):
    pass


class NullArgumentError(SpecimenError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} must not be None")
        self.name = name


class UnsupportedMatchingMode(SpecimenError, ValueError):
    def __init__(self, matching: object) -> None:
        super().__init__(f"unknown matching strategy: {matching!r}")
        self.matching = matching


class ResolutionError(SpecimenError, RuntimeError):
    def __init__(
        self, request: Any, reason: str, *, parameter: str | None = None
    ) -> None:
        from autospecimen.requests import type_name

        target = type_name(request)
        if parameter is not None:
            message = f"cannot resolve parameter {parameter!r} of type {target}: {reason}"
        else:
            message = f"cannot resolve {target}: {reason}"
        super().__init__(message)
        self.request = request
        self.reason = reason
        self.parameter = parameter


class UnsupportedCustomizationKind(SpecimenError, TypeError):
    def __init__(self, kind: type) -> None:
        super().__init__(
            f"invalid type {kind.__name__}: only Customization and SpecimenBuilder "
            "types can be auto-registered"
        )
        self.kind = kind


def require(value: Any, name: str) -> Any:
    if value is None:
        raise NullArgumentError(name)
    return value
