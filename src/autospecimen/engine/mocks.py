from __future__ import annotations

import collections.abc
import inspect
import logging
from typing import TYPE_CHECKING, Any, get_origin, get_type_hints
from unittest.mock import MagicMock, create_autospec

from autospecimen.engine.base import NO_SPECIMEN, SpecimenEngine
from autospecimen.errors import ResolutionError
from autospecimen.requests import is_abstract_request, strip_annotated, type_name

if TYPE_CHECKING:
    from autospecimen.engine.fixture import Fixture

logger = logging.getLogger(__name__)


class MockRelay:
    def __init__(self, *, configure_members: bool = False) -> None:
        self.configure_members = configure_members

    def create(self, request: Any, context: SpecimenEngine) -> Any:
        base, _ = strip_annotated(request)
        if base is collections.abc.Callable or get_origin(base) is collections.abc.Callable:
            return MagicMock(name=type_name(base))
        if not is_abstract_request(base):
            return NO_SPECIMEN
        mock = create_autospec(base, instance=True)
        if self.configure_members:
            self._configure(mock, base, context)
        logger.debug("mock substitute type=%s", type_name(base))
        return mock

    def _configure(self, mock: Any, cls: type, context: SpecimenEngine) -> None:
        for name, member in inspect.getmembers(cls, inspect.isfunction):
            if name.startswith("_"):
                continue
            try:
                hints = get_type_hints(member, include_extras=True)
            except (NameError, TypeError) as exc:
                raise ResolutionError(cls, f"unresolvable hints on {name}: {exc}") from exc
            returns = hints.get("return")
            if returns is None or returns is type(None):
                continue
            getattr(mock, name).return_value = context.resolve(returns)


class AutoMockCustomization:
    """Substitute autospec mocks for protocol and abstract classes.

    The relay is added to ``residue`` so explicit builders and pins always win
    over mocking.
    """

    def __init__(self, *, configure_members: bool = False) -> None:
        self.configure_members = configure_members

    def customize(self, engine: Fixture) -> None:
        engine.residue.append(MockRelay(configure_members=self.configure_members))
