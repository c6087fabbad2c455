from __future__ import annotations

from enum import Enum
from typing import Any, get_origin

from autospecimen.errors import UnsupportedMatchingMode
from autospecimen.requests import (
    ROOT_TYPES,
    is_interface,
    is_protocol_class,
    strip_annotated,
)


class Matching(str, Enum):
    """Which additional types share a frozen specimen.

    EXACT_TYPE freezes only the requested type. IMPLEMENTED_INTERFACES adds every
    protocol or abstract class in the MRO. DIRECT_BASE_TYPE adds the immediate
    base class, BASE_TYPE the whole base chain, and MEMBER_OF_FAMILY the union
    of interfaces and base chain. Protocols are never bases; an abstract class
    can be both an interface and a base. ``object`` and the typing roots are
    never matched.
    """

    EXACT_TYPE = "exact_type"
    IMPLEMENTED_INTERFACES = "implemented_interfaces"
    DIRECT_BASE_TYPE = "direct_base_type"
    BASE_TYPE = "base_type"
    MEMBER_OF_FAMILY = "member_of_family"


def implemented_interfaces(cls: type) -> frozenset[type]:
    return frozenset(base for base in cls.__mro__[1:] if is_interface(base))


def _direct_base(cls: type) -> type | None:
    for base in cls.__bases__:
        if base in ROOT_TYPES or is_protocol_class(base):
            continue
        return base
    return None


def base_chain(cls: type) -> tuple[type, ...]:
    chain: list[type] = []
    base = _direct_base(cls)
    while base is not None:
        chain.append(base)
        base = _direct_base(base)
    return tuple(chain)


def related_types(target: Any, matching: Matching) -> frozenset[type]:
    if not isinstance(matching, Matching):
        raise UnsupportedMatchingMode(matching)
    cls, _ = strip_annotated(target)
    if not isinstance(cls, type) or get_origin(cls) is not None:
        return frozenset()
    if matching is Matching.EXACT_TYPE:
        return frozenset()
    if matching is Matching.IMPLEMENTED_INTERFACES:
        return implemented_interfaces(cls)
    if matching is Matching.DIRECT_BASE_TYPE:
        direct = _direct_base(cls)
        return frozenset() if direct is None else frozenset({direct})
    if matching is Matching.BASE_TYPE:
        return frozenset(base_chain(cls))
    if matching is Matching.MEMBER_OF_FAMILY:
        return implemented_interfaces(cls) | frozenset(base_chain(cls))
    raise UnsupportedMatchingMode(matching)


def parse_matching(value: str) -> Matching:
    normalized = value.strip().lower().replace("-", "_")
    for member in Matching:
        if normalized in {member.value, member.name.lower()}:
            return member
    compact = normalized.replace("_", "")
    for member in Matching:
        if compact == member.value.replace("_", ""):
            return member
    raise UnsupportedMatchingMode(value)
