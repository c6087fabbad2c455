from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class FixtureSettings:
    seed: int | None = None
    repeat_count: int = 3
    max_depth: int = 8
    configure_members: bool = False
    discover_entry_points: bool = True

    def __post_init__(self) -> None:
        if self.repeat_count < 0:
            raise ValueError("repeat_count must be >= 0")
        if self.max_depth < 1:
            raise ValueError("max_depth must be >= 1")


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw == "":
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def default_settings() -> FixtureSettings:
    repeat_count = _env_int("AUTOSPECIMEN_REPEAT_COUNT", 3)
    max_depth = _env_int("AUTOSPECIMEN_MAX_DEPTH", 8)
    return FixtureSettings(
        seed=_env_int("AUTOSPECIMEN_SEED", None),
        repeat_count=3 if repeat_count is None else repeat_count,
        max_depth=8 if max_depth is None else max_depth,
        configure_members=_env_flag("AUTOSPECIMEN_CONFIGURE_MEMBERS", False),
        discover_entry_points=_env_flag("AUTOSPECIMEN_DISCOVER_ENTRY_POINTS", True),
    )
