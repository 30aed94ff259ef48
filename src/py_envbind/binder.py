"""Binder — populate a dataclass instance from the environment.

The binder ties the other modules together.  One ``map`` call:

1. Checks the target is a dataclass *instance* (not None, not a class).
2. Parses the tag of every field, in declaration order.  A bad tag on
   any field aborts before anything is assigned.
3. Takes one snapshot of the environment and attaches each field's
   value, looked up under ``application_name + separator + tag.name``.
4. Walks the fields again: resolves, coerces and assigns each one.

Usage::

    @dataclass
    class Config:
        port: int = env_field("PORT;mandatory;")
        host: str = env_field("HOST;optional;localhost")

    binder = Binder(naming=NamingConfig("demo", "_"))
    config = Config(port=0)
    binder.map(config)  # reads demo_PORT and demo_HOST

Fields the binder leaves alone without complaint:
    - fields with no tag (or an empty one),
    - fields of a frozen dataclass,
    - private fields (leading underscore),
    - optional fields with neither a value nor a default.

By default a failed call is **not atomic**: fields assigned before the
failing one keep their new values.  Pass ``atomic=True`` to resolve and
convert every field first and assign only if all of them succeeded.
"""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from py_envbind.coercion import FieldKind, coerce, kind_of
from py_envbind.env import capture_environment
from py_envbind.errors import (
    EnvBindError,
    InvalidTagError,
    InvalidValueError,
    MandatoryValueMissingError,
    NilTargetError,
    NotARecordError,
    OptionalValueMissing,
    UnsupportedKindError,
)
from py_envbind.logging import Logger, LogLevel
from py_envbind.resolver import FieldBinding, attach, lookup_key, resolve
from py_envbind.tags import parse_tag, tag_of

if TYPE_CHECKING:
    from collections.abc import Mapping

T = TypeVar("T")

_SOURCE = "binder"
_SUPPORTED_KINDS = ", ".join(FieldKind)
_BUILTIN_NAMES: dict[str, type] = {"int": int, "str": str}


@dataclass
class NamingConfig:
    """How tag names are turned into environment variable names.

    Attributes:
        application_name: Prepended to every tag name ("" for none).
        separator: Placed between the application name and tag name.

    """

    application_name: str = ""
    separator: str = ""

    @property
    def prefix(self) -> str:
        """Return the string prepended to every tag name."""
        return self.application_name + self.separator


class Binder:
    """Map environment variables onto tagged dataclass fields."""

    def __init__(
        self,
        *,
        naming: NamingConfig | None = None,
        environ: Mapping[str, str] | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a binder.

        Args:
            naming: Application name and separator (copied, so the setters
                never touch the caller's object).  Defaults to no prefix.
            environ: Mapping to read variables from.  If None, the live
                ``os.environ`` is snapshotted on every call.
            logger: Where to record binding decisions.  A fresh logger
                is created if omitted.

        """
        self._naming = dataclasses.replace(naming) if naming is not None else NamingConfig()
        self._environ = environ
        self._logger = logger if logger is not None else Logger()

    @property
    def naming(self) -> NamingConfig:
        """Return the naming configuration."""
        return self._naming

    @property
    def application_name(self) -> str:
        """Return the application name used as a key prefix."""
        return self._naming.application_name

    @property
    def separator(self) -> str:
        """Return the separator placed after the application name."""
        return self._naming.separator

    @property
    def logger(self) -> Logger:
        """Return the binding log."""
        return self._logger

    def set_application_name(self, name: str) -> None:
        """Set the application name prepended to every tag name."""
        self._naming.application_name = name

    def set_separator(self, sep: str) -> None:
        """Set the separator between application name and tag name.

        With application name ``demo`` and separator ``_``, a field
        tagged ``PORT`` reads ``demo_PORT``.
        """
        self._naming.separator = sep

    def map(self, target: object, *, atomic: bool = False) -> None:
        """Populate *target*'s tagged fields from the environment.

        Args:
            target: A dataclass instance, mutated in place.
            atomic: If True, assign nothing unless every field resolves.

        Raises:
            NilTargetError: *target* is None.
            NotARecordError: *target* is not a dataclass instance.
            InvalidTagError: A field's tag is malformed.
            UnsupportedKindError: A tagged field has an unsupported type.
            MandatoryValueMissingError: A mandatory field has no value.
            InvalidValueError: A value cannot be converted.

        """
        try:
            assigned = self._map(target, atomic=atomic)
        except EnvBindError as exc:
            self._logger.log(LogLevel.ERROR, str(exc), source=_SOURCE, field=exc.field or "")
            raise
        self._logger.log(
            LogLevel.INFO,
            f"Mapped {assigned} field(s) onto {type(target).__name__}",
            source=_SOURCE,
        )

    def _map(self, target: object, *, atomic: bool) -> int:
        record_fields = _record_fields(target)
        bindings = _parse_bindings(record_fields, _type_hints(type(target)))

        prefix = self._naming.prefix
        attach(bindings, capture_environment(self._environ), prefix)

        frozen = _is_frozen(target)
        staged: list[tuple[str, Any]] = []
        for binding in bindings:
            if not binding.tag.is_bound:
                continue
            if frozen or binding.field_name.startswith("_"):
                self._logger.log(
                    LogLevel.WARNING,
                    f"{binding.field_name} is tagged but not settable; skipped",
                    source=_SOURCE,
                    field=binding.field_name,
                )
                continue
            try:
                value = self._field_value(binding, prefix)
            except OptionalValueMissing:
                self._logger.log(
                    LogLevel.INFO,
                    f"{lookup_key(prefix, binding.tag)} not set; left unchanged",
                    source=_SOURCE,
                    field=binding.field_name,
                )
                continue
            staged.append((binding.field_name, value))
            if not atomic:
                setattr(target, binding.field_name, value)

        if atomic:
            for name, value in staged:
                setattr(target, name, value)
        return len(staged)

    def _field_value(self, binding: FieldBinding, prefix: str) -> int | str:
        name = binding.field_name
        key = lookup_key(prefix, binding.tag)
        if binding.kind is None:
            msg = f"field type of {key} is not one of: {_SUPPORTED_KINDS}"
            raise UnsupportedKindError(msg, field=name)

        try:
            resolution = resolve(binding)
        except MandatoryValueMissingError as exc:
            raise exc.with_field(name) from exc

        self._logger.log(
            LogLevel.DEBUG,
            f"{key} resolved from {resolution.source}",
            source="resolver",
            field=name,
        )
        try:
            return coerce(binding.kind, resolution.value)
        except ValueError as exc:
            raise InvalidValueError(field=name) from exc


def _record_fields(target: object) -> tuple[dataclasses.Field[Any], ...]:
    if target is None:
        raise NilTargetError
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        msg = f"expects a dataclass instance as the mapping target, got {type(target).__name__}"
        raise NotARecordError(msg)
    return dataclasses.fields(target)


def _parse_bindings(
    record_fields: tuple[dataclasses.Field[Any], ...],
    hints: dict[str, Any],
) -> list[FieldBinding]:
    bindings: list[FieldBinding] = []
    for position, field in enumerate(record_fields):
        try:
            tag = parse_tag(tag_of(field))
        except InvalidTagError as exc:
            raise exc.with_field(field.name) from exc
        bindings.append(
            FieldBinding(
                position=position,
                field_name=field.name,
                tag=tag,
                kind=_declared_kind(field, hints) if tag.is_bound else None,
            ),
        )
    return bindings


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except NameError:
        # Postponed annotation naming a TYPE_CHECKING-only import; fall back
        # to each field's raw annotation.
        return {}


def _declared_kind(field: dataclasses.Field[Any], hints: dict[str, Any]) -> FieldKind | None:
    annotation = hints.get(field.name, field.type)
    if isinstance(annotation, str):
        annotation = _BUILTIN_NAMES.get(annotation.strip())
    return kind_of(annotation)


def _is_frozen(target: object) -> bool:
    params = type(target).__dataclass_params__  # pyright: ignore[reportAttributeAccessIssue]
    return bool(params.frozen)


def bind(
    target: T,
    *,
    application_name: str = "",
    separator: str = "",
    environ: Mapping[str, str] | None = None,
    atomic: bool = False,
) -> T:
    """Populate *target* in one call and return it.

    Shorthand for building a ``Binder`` with the given naming and
    calling ``map``.  Raises whatever ``Binder.map`` raises.
    """
    binder = Binder(naming=NamingConfig(application_name, separator), environ=environ)
    binder.map(target, atomic=atomic)
    return target
