"""Shell environment variables kept in insertion order."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Environment:
    """An ordered set of shell variables.

    Variables that did not exist before are placed at the front, so the
    most recently created variable comes first when listed.
    """

    def __init__(
        self, variables: Mapping[str, str] | Iterable[tuple[str, str]] | None = None
    ) -> None:
        self._vars: dict[str, str] = dict(variables or {})

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None when it is not set."""
        return self._vars.get(key)

    def set(self, key: str, value: str) -> None:
        """Update ``key`` in place, or add it at the front if it is new."""
        if key in self._vars:
            self._vars[key] = value
        else:
            self._vars = {key: value, **self._vars}

    def unset(self, key: str) -> None:
        """Remove ``key``; removing a missing variable does nothing."""
        self._vars.pop(key, None)

    def items(self) -> list[tuple[str, str]]:
        """Return the (key, value) pairs in listing order."""
        return list(self._vars.items())

    def to_envp(self) -> list[str]:
        """Return the variables as ``KEY=VALUE`` strings."""
        return [f"{key}={value}" for key, value in self._vars.items()]

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the variables as a plain dictionary."""
        return dict(self._vars)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"Environment({self._vars!r})"