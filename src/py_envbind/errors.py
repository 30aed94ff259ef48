"""Errors raised while binding environment variables to a record.

Every failure that aborts a mapping call is an ``EnvBindError``.  The
error carries a short *reason* and, once the binder knows which field
was being processed, the *field* name:

    mandatory value missing in environment; field : Port

The parser and resolver raise errors without a field name because they
only ever see one tag or one value.  The binder attaches the name with
``with_field`` before re-raising, so every error a caller sees points
at the offending field.

``OptionalValueMissing`` is different: it is not an error at all but a
signal from the resolver meaning "leave this field alone".  The binder
catches it and moves on; it never reaches the caller.
"""

from __future__ import annotations

import copy


class EnvBindError(Exception):
    """Base class for every binding failure.

    Attributes:
        reason: What went wrong, independent of any field.
        field: The name of the field being bound, if known.

    """

    default_reason = "environment binding failed"

    def __init__(self, reason: str | None = None, *, field: str | None = None) -> None:
        """Create an error with an optional reason and field name."""
        self.reason = reason if reason is not None else self.default_reason
        self.field = field
        super().__init__(self.reason)

    def with_field(self, field: str) -> EnvBindError:
        """Return a copy of this error naming *field*.

        The original instance is left unchanged so a shared error is
        never relabelled behind someone's back.
        """
        tagged = copy.copy(self)
        tagged.field = field
        return tagged

    def __str__(self) -> str:
        """Format as ``reason; field : name``."""
        if self.field is None:
            return self.reason
        return f"{self.reason}; field : {self.field}"


class NilTargetError(EnvBindError, TypeError):
    """Raise when ``None`` is passed as the target record."""

    default_reason = "nil object received for mapping"


class NotARecordError(EnvBindError, TypeError):
    """Raise when the target is not a dataclass instance.

    Passing the class itself (rather than an instance) lands here too:
    there is nothing to mutate in place.
    """

    default_reason = "expects a dataclass instance as the mapping target"


class InvalidTagError(EnvBindError):
    """Raise when a field's ``env`` tag does not follow the grammar."""

    default_reason = "invalid tag"


class MandatoryValueMissingError(EnvBindError):
    """Raise when a mandatory field has no environment value and no default."""

    default_reason = "mandatory value missing in environment"


class InvalidValueError(EnvBindError, ValueError):
    """Raise when a resolved value cannot be converted to the field's type."""

    default_reason = "invalid value from environment / default"


class UnsupportedKindError(EnvBindError):
    """Raise when a tagged field is declared with a type we cannot coerce to."""

    default_reason = "unsupported field type"


# Not an EnvBindError: callers never see it.
class OptionalValueMissing(Exception):  # noqa: N818
    """Signal that an optional field has no value and should be skipped."""
