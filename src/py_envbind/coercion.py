"""Type coercion — turning resolved strings into field values.

Environment values are always strings.  A field declares what it wants
through its type hint, and this module maps that hint onto a closed set
of supported kinds:

- **INTEGER** — ``int`` fields.  Base 10, optional leading sign, ASCII
  digits only: ``"8080"`` and ``"-1"`` parse, ``" 8080"``, ``"1_000"``
  and ``"0x1F"`` do not.
- **TEXT** — ``str`` fields.  The value is used verbatim.

``bool`` is deliberately *not* an integer kind even though it
subclasses ``int``; ``"1"`` turning into ``True`` would be a surprise.
Adding a kind means adding a ``FieldKind`` member, a line in
``_KIND_BY_TYPE`` and a converter in ``_CONVERTERS``.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class FieldKind(StrEnum):
    """The kinds of field the binder knows how to fill."""

    INTEGER = "integer"
    TEXT = "text"


def _to_integer(text: str) -> int:
    if _INTEGER_PATTERN.fullmatch(text) is None:
        msg = f"invalid literal for a base 10 integer: {text!r}"
        raise ValueError(msg)
    return int(text, 10)


def _to_text(text: str) -> str:
    return text


_KIND_BY_TYPE: dict[object, FieldKind] = {
    int: FieldKind.INTEGER,
    str: FieldKind.TEXT,
}

_CONVERTERS: dict[FieldKind, Callable[[str], int | str]] = {
    FieldKind.INTEGER: _to_integer,
    FieldKind.TEXT: _to_text,
}


def kind_of(annotation: object) -> FieldKind | None:
    """Return the kind for a field's type hint, or None if unsupported."""
    return _KIND_BY_TYPE.get(annotation)


def coerce(kind: FieldKind, text: str) -> int | str:
    """Convert *text* into a value of the given kind.

    Args:
        kind: The target kind.
        text: The resolved string value.

    Returns:
        The converted value.

    Raises:
        ValueError: If *text* is not a valid value of *kind*.

    """
    return _CONVERTERS[kind](text)
