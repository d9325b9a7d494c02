"""Factory a host calls to obtain the encrypted properties source."""

from __future__ import annotations

from typing import Any

from ._environment import Environment
from ._source import ConfigSource, EncryptedPropertiesSource


class EncryptedPropertiesSourceFactory:
    """Builds a fresh ``EncryptedPropertiesSource`` per request.

    Keyword arguments are passed through to the source constructor, so the
    password resolver, encryptor factory and loader can be swapped here.
    """

    PRIORITY = 110

    def __init__(self, **source_options: Any) -> None:
        self._source_options = source_options

    @property
    def priority(self) -> int:
        return self.PRIORITY

    def get_config_sources(self, environment: Environment | None = None) -> list[ConfigSource]:
        options = dict(self._source_options)
        if environment is not None:
            options["environment"] = environment
        return [EncryptedPropertiesSource(**options)]
