"""Environment protocol and in-memory implementation for tests."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Environment(Protocol):
    """Abstraction over the process-wide value stores a lookup consults.

    Implementations are queried on every lookup, so changes made after a
    resolver is constructed are observed.
    """

    def get_env(self, name: str) -> str | None:
        ...

    def get_property(self, key: str) -> str | None:
        ...


class FakeEnvironment:
    """Dict-backed environment for tests.

    >>> env = FakeEnvironment(env={"DEBUG": "1"}, properties={"app.name": "demo"})
    >>> env.get_env("DEBUG")
    '1'
    >>> env.get_property("app.name")
    'demo'
    """

    def __init__(
        self,
        env: dict[str, str] | None = None,
        properties: dict[str, str] | None = None,
    ) -> None:
        self._env: dict[str, str] = dict(env or {})
        self._properties: dict[str, str] = dict(properties or {})

    # -- Protocol methods ---------------------------------------------------

    def get_env(self, name: str) -> str | None:
        return self._env.get(name)

    def get_property(self, key: str) -> str | None:
        return self._properties.get(key)

    # -- Mutation helpers for test setup ------------------------------------

    def set_env(self, name: str, value: str) -> None:
        self._env[name] = value

    def unset_env(self, name: str) -> None:
        self._env.pop(name, None)

    def set_property(self, key: str, value: str) -> None:
        self._properties[key] = value

    def unset_property(self, key: str) -> None:
        self._properties.pop(key, None)
