from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from autospecimen.config import FixtureSettings
from autospecimen.engine.fixture import Fixture
from autospecimen.factory import create_fixture, create_fixture_with_mocks
from autospecimen.generator import SpecimenDataGenerator
from autospecimen.parameters import parameters_from_callable

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)

_PASSTHROUGH_NAMES = {"self", "cls"}


def _engine_factory(mocks: bool, settings: FixtureSettings | None) -> Callable[[], Fixture]:
    if mocks:
        return lambda: create_fixture_with_mocks(settings)
    return lambda: create_fixture(settings)


def _bind(
    func: Callable[..., Any],
    inline: tuple[Any, ...],
    build_engine: Callable[[], Fixture],
) -> Callable[..., Any]:
    signature = inspect.signature(func)
    declared = list(signature.parameters.values())
    passthrough = declared[:1] if declared and declared[0].name in _PASSTHROUGH_NAMES else []
    if len(inline) > len(declared) - len(passthrough):
        raise TypeError(
            f"{func.__qualname__} takes {len(declared) - len(passthrough)} "
            f"parameters but {len(inline)} inline values were given"
        )

    @functools.wraps(func)
    def wrapper(*args: Any) -> Any:
        parameters = parameters_from_callable(func)
        engine = build_engine()
        values = SpecimenDataGenerator(engine).generate(parameters[len(inline):])
        logger.debug(
            "auto data call func=%s inline=%s generated=%s",
            func.__qualname__,
            len(inline),
            len(values),
        )
        return func(*args, *inline, *values)

    # runners inspect the signature; generated parameters must not look like fixtures
    wrapper.__signature__ = signature.replace(parameters=passthrough)  # type: ignore[attr-defined]
    return wrapper


def auto_data(
    func: F | None = None,
    *,
    mocks: bool = False,
    settings: FixtureSettings | None = None,
) -> Any:
    def decorate(target: F) -> F:
        return _bind(target, (), _engine_factory(mocks, settings))  # type: ignore[return-value]

    if func is not None:
        return decorate(func)
    return decorate


def auto_mock_data(func: F) -> F:
    return auto_data(func, mocks=True)


def inline_auto_data(
    *values: Any,
    mocks: bool = False,
    settings: FixtureSettings | None = None,
) -> Callable[[F], F]:
    def decorate(target: F) -> F:
        return _bind(target, values, _engine_factory(mocks, settings))  # type: ignore[return-value]

    return decorate
