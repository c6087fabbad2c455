from __future__ import annotations

import logging
from typing import Any

from autospecimen.engine.base import SpecimenEngine
from autospecimen.errors import UnsupportedMatchingMode, require
from autospecimen.matching import Matching, related_types
from autospecimen.requests import strip_annotated, type_name

logger = logging.getLogger(__name__)


class FreezeOnMatchCustomization:
    """Resolve one specimen of ``target`` and pin it for every matching type.

    The specimen is resolved through the engine, so a target that is already
    pinned yields the existing instance and nothing new is generated. Related
    types come from :func:`related_types` for the configured matching mode.
    """

    def __init__(self, target: Any, matching: Matching = Matching.EXACT_TYPE) -> None:
        require(target, "target")
        if not isinstance(matching, Matching):
            raise UnsupportedMatchingMode(matching)
        self.target, _ = strip_annotated(target)
        self.matching = matching

    def customize(self, engine: SpecimenEngine) -> None:
        require(engine, "engine")
        logger.debug(
            "freeze start target=%s matching=%s",
            type_name(self.target),
            self.matching.value,
        )
        specimen = engine.resolve(self.target)
        engine.pin(self.target, specimen)
        related = sorted(related_types(self.target, self.matching), key=type_name)
        for related_type in related:
            engine.pin(related_type, specimen)
        logger.debug(
            "freeze complete target=%s related=%s",
            type_name(self.target),
            [type_name(item) for item in related],
        )

    def __repr__(self) -> str:
        return (
            f"FreezeOnMatchCustomization({type_name(self.target)}, "
            f"{self.matching.name})"
        )


def freeze(target: Any, matching: Matching, engine: SpecimenEngine) -> None:
    FreezeOnMatchCustomization(target, matching).customize(engine)
