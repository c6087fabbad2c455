"""pytest fixtures; requires the ``autospecimen[pytest]`` extra."""

from __future__ import annotations

import pytest

from autospecimen.engine.fixture import Fixture
from autospecimen.factory import create_fixture, create_fixture_with_mocks


@pytest.fixture
def specimens() -> Fixture:
    return create_fixture()


@pytest.fixture
def mock_specimens() -> Fixture:
    return create_fixture_with_mocks()
