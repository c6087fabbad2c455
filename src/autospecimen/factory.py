from __future__ import annotations

from autospecimen.config import FixtureSettings, default_settings
from autospecimen.customizations import get_builtin_customizations
from autospecimen.customizations.registry import AutoRegisterCustomization
from autospecimen.engine.fixture import Fixture
from autospecimen.engine.mocks import AutoMockCustomization

# importing the package registers the built-in customizations
BUILTIN_CUSTOMIZATIONS = tuple(get_builtin_customizations())


def create_fixture(settings: FixtureSettings | None = None) -> Fixture:
    return Fixture(settings).customize(AutoRegisterCustomization())


def create_fixture_with_mocks(settings: FixtureSettings | None = None) -> Fixture:
    resolved = settings or default_settings()
    return (
        Fixture(resolved)
        .customize(AutoMockCustomization(configure_members=resolved.configure_members))
        .customize(AutoRegisterCustomization())
    )
