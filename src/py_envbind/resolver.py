"""Value resolution — deciding which string a field receives.

Each tagged field becomes a ``FieldBinding``: its position, its parsed
tag and, once the environment snapshot has been consulted, the value
found under its lookup key.  Resolution then follows one fixed order:

1. The environment value for ``prefix + tag.name``.
2. The tag's declared default.
3. Mandatory field → ``MandatoryValueMissingError``.
4. Optional field → ``OptionalValueMissing`` (the binder skips it).

Folding "required", "default" and "skip" into one decision keeps the
binder loop to a single call per field.

An environment entry holding the empty string counts as absent, so
``PORT=`` falls through to the default exactly like an unset ``PORT``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from py_envbind.errors import MandatoryValueMissingError, OptionalValueMissing

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_envbind.coercion import FieldKind
    from py_envbind.env import Environment
    from py_envbind.tags import FieldTag


class ValueSource(StrEnum):
    """Where a resolved value came from."""

    ENVIRONMENT = "environment"
    DEFAULT = "default"


@dataclass(frozen=True)
class Resolution:
    """A resolved value and its origin."""

    value: str
    source: ValueSource


@dataclass
class FieldBinding:
    """Working state for one field during a single mapping call.

    Not frozen — ``resolved_value`` is filled in after the environment
    snapshot is taken.

    Attributes:
        position: The field's ordinal in the record.
        field_name: The attribute name on the record.
        tag: The parsed tag.
        kind: The field's declared kind, or None if unsupported.
        resolved_value: Environment value for the lookup key, if any.

    """

    position: int
    field_name: str
    tag: FieldTag
    kind: FieldKind | None = None
    resolved_value: str | None = None


def lookup_key(prefix: str, tag: FieldTag) -> str:
    """Return the fully qualified variable name for *tag*."""
    return prefix + tag.name


def attach(bindings: Iterable[FieldBinding], environment: Environment, prefix: str) -> None:
    """Copy each binding's environment value out of the snapshot.

    Bindings whose lookup key is not in *environment* keep
    ``resolved_value`` as None.
    """
    for binding in bindings:
        key = lookup_key(prefix, binding.tag)
        if key in environment:
            binding.resolved_value = environment.get(key)


def resolve(binding: FieldBinding) -> Resolution:
    """Pick the value for *binding* by precedence.

    Returns:
        The chosen value and where it came from.

    Raises:
        MandatoryValueMissingError: A mandatory field has no value.
        OptionalValueMissing: An optional field has no value.

    """
    if binding.resolved_value:
        return Resolution(binding.resolved_value, ValueSource.ENVIRONMENT)
    if binding.tag.default:
        return Resolution(binding.tag.default, ValueSource.DEFAULT)
    if binding.tag.required:
        raise MandatoryValueMissingError
    raise OptionalValueMissing
