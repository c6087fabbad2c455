from __future__ import annotations

import random
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, get_origin

from autospecimen.engine.base import NO_SPECIMEN

_EPOCH = datetime(2000, 1, 1)
_TEN_YEARS_SECONDS = 10 * 365 * 24 * 60 * 60


def _uuid(rng: random.Random) -> uuid.UUID:
    return uuid.UUID(int=rng.getrandbits(128), version=4)


def _string(rng: random.Random) -> str:
    return str(_uuid(rng))


def _integer(rng: random.Random) -> int:
    return rng.randint(1, 65535)


def _floating(rng: random.Random) -> float:
    return round(rng.uniform(1.0, 65535.0), 3)


def _boolean(rng: random.Random) -> bool:
    return rng.random() < 0.5


def _binary(rng: random.Random) -> bytes:
    return bytes(rng.getrandbits(8) for _ in range(16))


def _decimal(rng: random.Random) -> Decimal:
    return Decimal(rng.randint(1, 6553500)) / Decimal(100)


def _datetime(rng: random.Random) -> datetime:
    return _EPOCH + timedelta(seconds=rng.randint(0, _TEN_YEARS_SECONDS))


def _timedelta(rng: random.Random) -> timedelta:
    return timedelta(seconds=rng.randint(1, 24 * 60 * 60))


def _anything(rng: random.Random) -> object:
    _ = rng
    return object()


PRIMITIVES: dict[Any, Callable[[random.Random], Any]] = {
    str: _string,
    int: _integer,
    float: _floating,
    bool: _boolean,
    bytes: _binary,
    Decimal: _decimal,
    uuid.UUID: _uuid,
    datetime: _datetime,
    timedelta: _timedelta,
    object: _anything,
    Any: _anything,
}


def create_primitive(request: Any, rng: random.Random) -> Any:
    if request is type(None):
        return None
    try:
        factory = PRIMITIVES.get(request)
    except TypeError:
        return NO_SPECIMEN
    if factory is not None:
        return factory(rng)
    if (
        isinstance(request, type)
        and get_origin(request) is None
        and issubclass(request, Enum)
    ):
        members = list(request)
        if not members:
            return NO_SPECIMEN
        return rng.choice(members)
    return NO_SPECIMEN
