"""Tag grammar — how a field declares which environment variable feeds it.

A tag is a short string attached to a dataclass field::

    port: int = env_field("PORT;mandatory;8080")

The grammar is ``<name>[;<mandatory|optional>[;<default>]]``:

1. **name** — the variable name *before* any application prefix.
   Surrounding whitespace is stripped; it must not be empty.
2. **mode** — exactly ``mandatory`` or ``optional`` (case-sensitive).
   Omitted means optional.
3. **default** — taken verbatim.  An empty default is the same as no
   default at all, so ``"PORT;mandatory;"`` is still mandatory.

Anything after the third segment is ignored.  An empty tag is legal
and means "this field is not bound to any variable".
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from py_envbind.errors import InvalidTagError

TAG_KEY = "env"
SEPARATOR = ";"


class Requirement(StrEnum):
    """The two legal values of a tag's mode segment."""

    MANDATORY = "mandatory"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class FieldTag:
    """The parsed form of one field's tag.

    Attributes:
        name: Variable name without the application prefix.
        required: True if the field is mandatory.
        default: Fallback value, or None when no default is declared.

    """

    name: str = ""
    required: bool = False
    default: str | None = None

    @property
    def is_bound(self) -> bool:
        """Return True if the tag names a variable at all."""
        return self.name != ""


def parse_tag(raw: str) -> FieldTag:
    """Parse a raw tag string into a ``FieldTag``.

    Args:
        raw: The tag text, e.g. ``"HOST;optional;localhost"``.

    Returns:
        The parsed tag.  An empty *raw* yields an unbound tag.

    Raises:
        InvalidTagError: If the name is blank or the mode is not
            ``mandatory``/``optional``.

    """
    if not raw:
        return FieldTag()

    segments = raw.split(SEPARATOR)

    name = segments[0].strip()
    if not name:
        msg = f"invalid tag {raw!r}: empty variable name"
        raise InvalidTagError(msg)
    if len(segments) < 2:  # noqa: PLR2004
        return FieldTag(name=name)

    mode = segments[1]
    if mode not in tuple(Requirement):
        msg = f"invalid tag {raw!r}: mode must be 'mandatory' or 'optional', got {mode!r}"
        raise InvalidTagError(msg)
    required = mode == Requirement.MANDATORY
    if len(segments) < 3:  # noqa: PLR2004
        return FieldTag(name=name, required=required)

    return FieldTag(name=name, required=required, default=segments[2] or None)


def format_tag(tag: FieldTag) -> str:
    """Render a ``FieldTag`` back into tag grammar.

    Unbound tags render as the empty string.  Optional tags without a
    default render as just the name.
    """
    if not tag.is_bound:
        return ""
    mode = Requirement.MANDATORY if tag.required else Requirement.OPTIONAL
    if tag.default is not None:
        return SEPARATOR.join((tag.name, mode, tag.default))
    if tag.required:
        return SEPARATOR.join((tag.name, mode))
    return tag.name


def env_field(tag: str, **kwargs: Any) -> Any:  # noqa: ANN401
    """Declare a dataclass field bound to an environment variable.

    A thin wrapper around ``dataclasses.field`` that stores *tag* in
    the field metadata.  The tag is parsed right away so a typo fails
    when the class is defined, not on the first ``map`` call.

    Args:
        tag: The tag string (see module docstring for the grammar).
        **kwargs: Passed through to ``dataclasses.field``.

    Returns:
        A dataclass field descriptor.

    Raises:
        InvalidTagError: If *tag* is malformed.

    """
    parse_tag(tag)
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    return dataclasses.field(metadata=metadata, **kwargs)


def tag_of(field: dataclasses.Field[Any]) -> str:
    """Return the raw tag stored on a dataclass field (empty if none)."""
    return field.metadata.get(TAG_KEY, "")
