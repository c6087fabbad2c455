from __future__ import annotations

from autospecimen.customizations.generators import DateGenerator, EventGenerator
from autospecimen.customizations.immutable import ImmutableCollectionCustomization


def get_builtin_customizations() -> list[type]:
    return [DateGenerator, EventGenerator, ImmutableCollectionCustomization]
