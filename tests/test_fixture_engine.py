from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Literal, NewType, Optional

import pytest

from autospecimen.config import FixtureSettings
from autospecimen.engine.fixture import Fixture
from autospecimen.errors import NullArgumentError, ResolutionError
from subjects import (
    Address,
    Color,
    ConcreteService,
    Invoice,
    IService,
    LinkedNode,
    Money,
    Order,
    Person,
    TreeNode,
    Untyped,
)

UserId = NewType("UserId", int)


def _fixture(**overrides: object) -> Fixture:
    return Fixture(FixtureSettings(seed=42, **overrides))  # type: ignore[arg-type]


def test_primitives_have_requested_types() -> None:
    fixture = _fixture()
    assert isinstance(fixture.create(str), str)
    assert isinstance(fixture.create(int), int)
    assert isinstance(fixture.create(float), float)
    assert isinstance(fixture.create(bool), bool)
    assert isinstance(fixture.create(bytes), bytes)
    assert isinstance(fixture.create(Decimal), Decimal)
    assert isinstance(fixture.create(uuid.UUID), uuid.UUID)
    assert isinstance(fixture.create(datetime), datetime)
    assert fixture.create(Color) in set(Color)
    assert fixture.create(type(None)) is None


def test_seeded_fixtures_are_deterministic() -> None:
    first = _fixture()
    second = _fixture()
    assert [first.create(str) for _ in range(3)] == [second.create(str) for _ in range(3)]
    assert first.create(int) == second.create(int)


def test_strings_are_distinct() -> None:
    fixture = _fixture()
    values = fixture.create_many(str, 10)
    assert len(set(values)) == 10


def test_containers() -> None:
    fixture = _fixture()
    numbers = fixture.create(list[int])
    assert len(numbers) == 3
    assert all(isinstance(item, int) for item in numbers)
    mapping = fixture.create(dict[str, int])
    assert len(mapping) == 3
    assert isinstance(fixture.create(set[int]), set)
    assert isinstance(fixture.create(Sequence[str]), list)
    assert isinstance(fixture.create(Mapping[str, float]), dict)
    pair = fixture.create(tuple[int, str])
    assert isinstance(pair[0], int)
    assert isinstance(pair[1], str)
    assert len(fixture.create(tuple[int, ...])) == 3
    assert fixture.create(list) == []
    assert fixture.create(dict) == {}


def test_repeat_count_controls_collection_size() -> None:
    fixture = _fixture(repeat_count=5)
    assert len(fixture.create(list[str])) == 5
    assert len(fixture.create_many(int)) == 5
    assert fixture.create_many(int, 0) == []


def test_typing_forms() -> None:
    fixture = _fixture()
    assert fixture.create(Literal["a", "b"]) in {"a", "b"}
    assert isinstance(fixture.create(Optional[int]), int)
    assert isinstance(fixture.create(str | None), str)
    assert fixture.create(type[Person]) is Person
    assert isinstance(fixture.create(UserId), int)


def test_plain_class_members_are_populated() -> None:
    person = _fixture().create(Person)
    assert isinstance(person.name, str)
    assert person.name != ""
    assert isinstance(person.age, int)
    assert isinstance(person.address, Address)
    assert isinstance(person.address.city, str)


def test_dataclass_fields_are_populated() -> None:
    order = _fixture().create(Order)
    assert isinstance(order.order_id, int)
    assert isinstance(order.customer, Person)
    assert len(order.lines) == 3
    assert isinstance(order.color, Color)
    money = _fixture().create(Money)
    assert isinstance(money.amount, int)


def test_pydantic_model_uses_aliases() -> None:
    invoice = _fixture().create(Invoice)
    assert isinstance(invoice, Invoice)
    assert isinstance(invoice.owner_name, str)
    assert len(invoice.tags) == 3


def test_optional_self_reference_terminates_with_none() -> None:
    node = _fixture().create(LinkedNode)
    assert isinstance(node.value, int)
    assert node.next is None


def test_required_self_reference_is_circular() -> None:
    with pytest.raises(ResolutionError, match="circular"):
        _fixture().create(TreeNode)


def test_max_depth_is_enforced() -> None:
    with pytest.raises(ResolutionError, match="deeper than 1"):
        _fixture(max_depth=1).create(Person)


def test_untyped_constructor_parameter_fails() -> None:
    with pytest.raises(ResolutionError, match="no annotation"):
        _fixture().create(Untyped)


def test_abstract_request_without_mocks_fails() -> None:
    with pytest.raises(ResolutionError, match="abstract"):
        _fixture().create(IService)


def test_failed_resolution_leaves_fixture_usable() -> None:
    fixture = _fixture()
    with pytest.raises(ResolutionError):
        fixture.create(TreeNode)
    assert isinstance(fixture.create(Person), Person)


def test_customize_type_overrides_members() -> None:
    fixture = _fixture().customize_type(Person, name="Ada", age=36)
    person = fixture.create(Person)
    assert person.name == "Ada"
    assert person.age == 36
    assert isinstance(person.address, Address)


def test_customize_type_overrides_dataclass_fields() -> None:
    fixture = _fixture().customize_type(Money, currency="EUR")
    assert fixture.create(Money).currency == "EUR"


def test_register_factory_wins_over_builtin() -> None:
    fixture = _fixture()
    fixture.register(str, lambda _: "fixed")
    assert fixture.create(str) == "fixed"
    assert fixture.create(Person).name == "fixed"


def test_latest_registration_takes_precedence() -> None:
    fixture = _fixture()
    fixture.register(int, lambda _: 1)
    fixture.register(int, lambda _: 2)
    assert fixture.create(int) == 2


def test_pins_are_first_wins() -> None:
    fixture = _fixture()
    first = ConcreteService()
    second = ConcreteService()
    fixture.pin(IService, first)
    fixture.inject(IService, second)
    assert fixture.create(IService) is first
    assert fixture.is_pinned(IService)
    assert not fixture.is_pinned(ConcreteService)


def test_null_request_rejected() -> None:
    fixture = _fixture()
    with pytest.raises(NullArgumentError):
        fixture.create(None)
    with pytest.raises(NullArgumentError):
        fixture.pin(None, object())


def test_settings_validation() -> None:
    with pytest.raises(ValueError, match="repeat_count"):
        FixtureSettings(repeat_count=-1)
    with pytest.raises(ValueError, match="max_depth"):
        FixtureSettings(max_depth=0)


def test_inject_on_pinned_type_warns_and_keeps_pin(
    caplog: pytest.LogCaptureFixture,
) -> None:
    fixture = _fixture()
    first = ConcreteService()
    fixture.inject(IService, first)
    with caplog.at_level(logging.WARNING, logger="autospecimen.engine.fixture"):
        fixture.inject(IService, ConcreteService())
    assert fixture.create(IService) is first
    assert "inject ignored" in caplog.text


def test_register_after_freeze_does_not_replace_pin(
    caplog: pytest.LogCaptureFixture,
) -> None:
    fixture = _fixture()
    frozen = fixture.freeze(Person)
    with caplog.at_level(logging.WARNING, logger="autospecimen.engine.fixture"):
        fixture.register(Person, lambda _: Person())
    assert fixture.create(Person) is frozen
    assert "already pinned" in caplog.text


def test_register_on_unpinned_type_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    fixture = _fixture()
    with caplog.at_level(logging.WARNING, logger="autospecimen.engine.fixture"):
        fixture.register(Person, lambda _: Person())
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]
