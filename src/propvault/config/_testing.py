"""Test utilities for the config module."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ._environment import FakeEnvironment
from ._reader import get_environment, set_environment


@contextmanager
def override_environment(
    *,
    env: dict[str, str] | None = None,
    properties: dict[str, str] | None = None,
) -> Iterator[FakeEnvironment]:
    """Temporarily replace the process environment with a ``FakeEnvironment``.

    Usage::

        with override_environment(env={"JASYPT_PASSWORD": "secret"}) as fake:
            source = EncryptedPropertiesSource(loader=loader)
            fake.set_property("feature.enabled", "true")  # mutate inside context
    """
    previous = get_environment()
    fake = FakeEnvironment(env=env, properties=properties)
    set_environment(fake)
    try:
        yield fake
    finally:
        set_environment(previous)
