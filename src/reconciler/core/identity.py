"""Composite identity codec.

A composite identity names a child object inside a parent, e.g. a node
joined to a network, as a single string ``"<parent_id>:<child_id>"``. Both
components are non-negative base-10 integers that fit a signed 64-bit value,
so no escaping is needed.
"""

import re
from typing import NamedTuple

from ..constants import IDENTITY_SEPARATOR, MAX_INT64
from ..utils.exceptions import InvalidComponentError, MalformedIdentityError

_DIGITS = re.compile(r"[0-9]+")


class CompositeIdentity(NamedTuple):
    """Decoded two-part identity."""

    parent_id: int
    child_id: int

    def __str__(self) -> str:
        return encode(self.parent_id, self.child_id)


def _check_component(value: int, position: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_INT64:
        raise InvalidComponentError(str(value), str(value), position)


def encode(parent_id: int, child_id: int) -> str:
    """
    Build ``"<parent_id>:<child_id>"``.

    Raises:
        InvalidComponentError: If either component is negative, not an int,
            or outside the int64 range.
    """
    _check_component(parent_id, "parent")
    _check_component(child_id, "child")
    return f"{parent_id}{IDENTITY_SEPARATOR}{child_id}"


def _parse_component(value: str, component: str, position: str) -> int:
    # fullmatch rejects signs, whitespace, underscores and non-ASCII digits
    # that int() would otherwise accept
    if not _DIGITS.fullmatch(component):
        raise InvalidComponentError(value, component, position)
    parsed = int(component)
    if parsed > MAX_INT64:
        raise InvalidComponentError(value, component, position)
    return parsed


def decode(value: str) -> CompositeIdentity:
    """
    Split a composite identity into its two integer components.

    Args:
        value: Identity string such as "12:7"

    Returns:
        CompositeIdentity(parent_id, child_id)

    Raises:
        MalformedIdentityError: If splitting on ':' does not yield exactly two segments.
        InvalidComponentError: If a segment is empty or not a base-10 int64.
    """
    segments = value.split(IDENTITY_SEPARATOR)
    if len(segments) != 2:
        raise MalformedIdentityError(value, len(segments))

    parent, child = segments
    return CompositeIdentity(
        parent_id=_parse_component(value, parent, "parent"),
        child_id=_parse_component(value, child, "child"),
    )
