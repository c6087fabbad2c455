from __future__ import annotations

import logging
import threading
from datetime import date
from types import MappingProxyType
from typing import Any

import pytest

from autospecimen.config import FixtureSettings
from autospecimen.customizations import registry as registry_module
from autospecimen.customizations.registry import (
    AutoRegisterCustomization,
    CustomizationRegistry,
    customization_kind,
    default_registry,
)
from autospecimen.engine.base import NO_SPECIMEN
from autospecimen.engine.fixture import Fixture
from autospecimen.errors import NullArgumentError, UnsupportedCustomizationKind
from autospecimen.factory import create_fixture
from subjects import Person


class FixedNameBuilder:
    def create(self, request: Any, context: Any) -> Any:
        _ = context
        if request is not str:
            return NO_SPECIMEN
        return "fixed-name"


class YoungPeople:
    def customize(self, engine: Fixture) -> None:
        engine.customize_type(Person, age=7)


class _FakeEntryPoint:
    def __init__(self, loaded: type) -> None:
        self.loaded = loaded

    def load(self) -> type:
        return self.loaded


def _fixture() -> Fixture:
    return Fixture(FixtureSettings(seed=9))


def test_builtin_customizations_are_applied() -> None:
    fixture = create_fixture(FixtureSettings(seed=9))
    assert type(fixture.create(date)) is date
    event = fixture.create(threading.Event)
    assert isinstance(event, threading.Event)
    assert not event.is_set()
    frozen = fixture.create(frozenset[int])
    assert isinstance(frozen, frozenset)
    assert frozen
    proxy = fixture.create(MappingProxyType[str, int])
    assert isinstance(proxy, MappingProxyType)
    assert len(proxy) == 3


def test_default_registry_lists_builtins() -> None:
    names = {record.name for record in default_registry.records()}
    assert {"DateGenerator", "EventGenerator", "ImmutableCollectionCustomization"} <= names


def test_customization_kind() -> None:
    assert customization_kind(FixedNameBuilder) == "builder"
    assert customization_kind(YoungPeople) == "customization"
    with pytest.raises(UnsupportedCustomizationKind):
        customization_kind(Person)


def test_register_rejects_unsupported_types() -> None:
    registry = CustomizationRegistry(discover_entry_points=False)
    with pytest.raises(UnsupportedCustomizationKind, match="Person"):
        registry.register(Person)
    with pytest.raises(NullArgumentError):
        registry.register(None)  # type: ignore[arg-type]


def test_registered_types_apply_to_fixture() -> None:
    registry = CustomizationRegistry(discover_entry_points=False)
    registry.register(FixedNameBuilder)
    registry.register(YoungPeople)
    fixture = _fixture().customize(AutoRegisterCustomization(registry=registry))
    person = fixture.create(Person)
    assert person.name == "fixed-name"
    assert person.age == 7
    assert len(fixture.customizations) == 1


def test_explicit_type_list_skips_registry() -> None:
    registry = CustomizationRegistry(discover_entry_points=False)
    registry.register(FixedNameBuilder)
    fixture = _fixture().customize(
        AutoRegisterCustomization([YoungPeople], registry=registry)
    )
    assert fixture.create(Person).age == 7
    assert fixture.create(str) != "fixed-name"
    assert not registry.published


def test_discovery_publishes_once_across_threads(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_entry_points(*, group: str) -> list[_FakeEntryPoint]:
        calls.append(group)
        return [_FakeEntryPoint(YoungPeople)]

    monkeypatch.setattr(registry_module, "entry_points", fake_entry_points)
    registry = CustomizationRegistry(group="tests.custom", discover_entry_points=True)
    registry.register(FixedNameBuilder)

    start = threading.Barrier(8)
    results: list[tuple[type, ...]] = []
    lock = threading.Lock()

    def worker() -> None:
        start.wait()
        snapshot = registry.discover()
        with lock:
            results.append(snapshot)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == ["tests.custom"]
    assert len(results) == 8
    assert all(snapshot is results[0] for snapshot in results)
    assert results[0] == (FixedNameBuilder, YoungPeople)


def test_records_report_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        registry_module,
        "entry_points",
        lambda *, group: [_FakeEntryPoint(YoungPeople)],
    )
    registry = CustomizationRegistry(discover_entry_points=True)
    registry.register(FixedNameBuilder)
    records = {record.name: record for record in registry.records()}
    assert records["FixedNameBuilder"].source == "explicit"
    assert records["FixedNameBuilder"].kind == "builder"
    assert records["YoungPeople"].source == "entry_point"
    assert records["YoungPeople"].kind == "customization"
    assert records["YoungPeople"].module == __name__


def test_entry_point_loading_unsupported_type_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        registry_module,
        "entry_points",
        lambda *, group: [_FakeEntryPoint(Person)],
    )
    registry = CustomizationRegistry(discover_entry_points=True)
    with pytest.raises(UnsupportedCustomizationKind):
        registry.discover()
    assert not registry.published


def test_entry_points_disabled_by_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_entry_points(*, group: str) -> list[_FakeEntryPoint]:
        raise AssertionError(f"entry points scanned for {group}")

    monkeypatch.setattr(registry_module, "entry_points", fail_entry_points)
    monkeypatch.setenv("AUTOSPECIMEN_DISCOVER_ENTRY_POINTS", "0")
    registry = CustomizationRegistry()
    registry.register(YoungPeople)
    assert registry.discover() == (YoungPeople,)


def test_registration_after_publish_is_not_applied(
    caplog: pytest.LogCaptureFixture,
) -> None:
    registry = CustomizationRegistry(discover_entry_points=False)
    registry.register(YoungPeople)
    snapshot = registry.discover()
    with caplog.at_level(logging.WARNING, logger="autospecimen.customizations.registry"):
        registry.register(FixedNameBuilder)
    assert registry.discover() is snapshot
    assert FixedNameBuilder not in snapshot
    assert "registered after discovery" in caplog.text


def test_duplicate_registration_is_ignored() -> None:
    registry = CustomizationRegistry(discover_entry_points=False)
    registry.register(YoungPeople)
    registry.register(YoungPeople)
    assert registry.discover() == (YoungPeople,)


def test_customize_requires_engine() -> None:
    with pytest.raises(NullArgumentError):
        AutoRegisterCustomization([]).customize(None)  # type: ignore[arg-type]
