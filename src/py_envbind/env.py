"""Environment snapshots — a frozen view of the process environment.

Every process has an environment: ``KEY=VALUE`` string pairs inherited
from its parent.  The binder never reads ``os.environ`` field by field;
it takes one snapshot per mapping call and resolves every field against
that, so a variable changing halfway through cannot produce a record
built from two different environments.

Key properties:
    - **Fresh per call** — snapshots are never cached; the next call
      sees whatever the environment holds then.
    - **Strings only** — both keys and values are strings.
    - **First ``=`` wins** — a raw ``KEY=a=b`` record splits into
      ``KEY`` and ``a=b``; values may contain ``=``.
    - **Injectable** — any mapping can stand in for ``os.environ``, so
      tests never have to touch real process state.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Environment:
    """A key-value store for environment variables.

    Each instance holds its own copy of its variables, so modifying it
    never touches the process environment it was taken from.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        """Create an environment, optionally pre-populated.

        Args:
            initial: Starting variables (copied, not referenced).

        """
        self._vars: dict[str, str] = dict(initial) if initial else {}

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if not set."""
        return self._vars.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value* (creates or overwrites)."""
        self._vars[key] = value

    def items(self) -> list[tuple[str, str]]:
        """Return all (key, value) pairs."""
        return list(self._vars.items())

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is set."""
        return key in self._vars

    def __len__(self) -> int:
        """Return the number of variables."""
        return len(self._vars)


def parse_entries(entries: Iterable[str]) -> Environment:
    """Build an environment from raw ``NAME=VALUE`` records.

    Only the first ``=`` separates name from value.  Records without
    any ``=`` carry no value and are skipped.  A later record for the
    same name overwrites an earlier one.

    Args:
        entries: Records such as ``"PATH=/usr/bin"``.

    Returns:
        A new environment holding the parsed variables.

    """
    env = Environment()
    for entry in entries:
        name, sep, value = entry.partition("=")
        if not sep:
            continue
        env.set(name, value)
    return env


def capture_environment(source: Mapping[str, str] | None = None) -> Environment:
    """Take a snapshot of *source*, or of ``os.environ`` by default.

    Args:
        source: Any string mapping standing in for the environment.

    Returns:
        A new, independent environment.

    """
    return Environment(initial=os.environ if source is None else source)
