"""Config source serving property-file values with opportunistic decryption.

Construction runs once, in order:

1. resolve the password (``jasypt.password`` → ``jasypt.key`` → default hook)
2. resolve the candidate list (``jasypt.properties``)
3. load the first readable property file
4. build the encryptor from the password

Lookups then consult, in order, the environment variable derived from the
key, the process property with the literal key, the loaded file (decrypting
where possible) and finally the caller's default.

.. warning::

   When no password is configured the single-space placeholder is used.
   Encrypted values then fail to decrypt and are served as raw ciphertext,
   with only a log message to show for it.

Failures on values wrapped in ``ENC(...)`` are logged at WARNING (DEBUG with
a traceback when the logger is verbose). Bare values are usually plaintext,
so their failures are only logged at DEBUG.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Protocol, runtime_checkable

from pydantic import ValidationError

from ._encryptor import Encryptor, PBEStringEncryptor, unwrap_encrypted
from ._environment import Environment
from ._loader import LoadedProperties, SourceLoader
from ._reader import _auto_environment, lookup_overlay
from ._settings import EncryptionSettings
from ._types import DecryptionError, Secret

logger = logging.getLogger(__name__)

#: Placeholder used when no password is configured anywhere.
DEFAULT_PASSWORD = " "

_DECRYPTION_FAILURE_MESSAGE = "Could not decrypt property %s; falling back to unencrypted property"


@runtime_checkable
class ConfigSource(Protocol):
    """What a host needs to compose a source into its ordered chain."""

    @property
    def name(self) -> str:
        ...

    @property
    def ordinal(self) -> int:
        ...

    def all_keys(self) -> frozenset[str]:
        ...

    def all_entries(self) -> dict[str, str]:
        ...

    def get(self, key: str) -> str | None:
        ...


# ---------------------------------------------------------------------------
# Construction strategies
# ---------------------------------------------------------------------------


def default_password() -> str:
    return DEFAULT_PASSWORD


class PasswordResolver:
    """Picks the encryption password from the loaded settings.

    ``jasypt.password`` wins over its alias ``jasypt.key``; empty values count
    as unset. If neither is set, *default_password* is called.
    """

    def __init__(self, default_password: Callable[[], str] = default_password) -> None:
        self._default_password = default_password

    def __call__(self, settings: EncryptionSettings) -> Secret[str]:
        for candidate in (settings.password, settings.key):
            if candidate:
                return candidate
        return Secret(self._default_password())


EncryptorFactory = Callable[[Secret[str], EncryptionSettings], Encryptor]


def pbe_encryptor_factory(password: Secret[str], settings: EncryptionSettings) -> Encryptor:
    return PBEStringEncryptor(
        password,
        algorithm=settings.algorithm,
        iterations=settings.iterations,
    )


def load_settings(environment: Environment | None = None) -> EncryptionSettings:
    """Load ``EncryptionSettings``, replacing invalid values with their defaults.

    Each rejected setting is logged at WARNING with its key. The value itself
    is not logged.
    """
    try:
        return EncryptionSettings.load(environment=environment)
    except ValidationError as exc:
        invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        for field_name in sorted(invalid):
            logger.warning(
                "Ignoring invalid setting %s; using the default",
                EncryptionSettings.setting_key(field_name),
            )
        return EncryptionSettings.load(environment=environment, skip=invalid)


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


class EncryptedPropertiesSource:
    """Config source backed by a property file with opportunistically decrypted values.

    Parameters
    ----------
    environment:
        Where environment variables and process properties are read from. When
        omitted, the module-level environment is used at each call.
    password_resolver:
        Strategy choosing the password from ``EncryptionSettings``.
    encryptor_factory:
        Builds the ``Encryptor`` from the password and settings.
    loader:
        Loads the base property file; pass one with explicit resource roots to
        control where ``classpath:`` candidates are looked up.
    """

    NAME = "EncryptedPropertiesSource"

    #: Above a generic application source (250), below the environment source (300).
    ORDINAL = 270

    def __init__(
        self,
        *,
        environment: Environment | None = None,
        password_resolver: Callable[[EncryptionSettings], Secret[str]] | None = None,
        encryptor_factory: EncryptorFactory | None = None,
        loader: SourceLoader | None = None,
    ) -> None:
        logger.info("Loading %s", self.NAME)
        self._environment = environment

        settings = load_settings(environment)
        password = (password_resolver or PasswordResolver())(settings)

        loaded: LoadedProperties = (loader or SourceLoader()).load(settings.properties)
        self._properties: Mapping[str, str] = loaded.properties
        self._source = loaded.source

        self._encryptor = (encryptor_factory or pbe_encryptor_factory)(password, settings)

    # -- identity -----------------------------------------------------------

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def ordinal(self) -> int:
        return self.ORDINAL

    @property
    def source(self) -> str:
        """Identifier of the loaded property file, or ``"n/a"``."""
        return self._source

    def __repr__(self) -> str:
        return self.NAME

    # -- lookups ------------------------------------------------------------

    def get(
        self,
        key: str,
        default: str | None = None,
        *,
        default_factory: Callable[[], str | None] | None = None,
    ) -> str | None:
        """Return the effective value for *key*.

        Environment and process-property values are returned verbatim. File
        values are decrypted when possible and returned raw otherwise. If the
        key is found nowhere, *default_factory* is called if given, else
        *default* is returned.
        """
        overlay = lookup_overlay(self._environment or _auto_environment(), key)
        if overlay is not None:
            return overlay

        if key in self._properties:
            return self._decrypt_or_raw(key)

        if default_factory is not None:
            return default_factory()
        return default

    def all_keys(self) -> frozenset[str]:
        """Keys of the loaded property file. Overlays are not enumerated."""
        return frozenset(self._properties)

    def all_entries(self) -> dict[str, str]:
        """Every loaded key with its decrypted (or raw) value, without overlays."""
        return {key: self._decrypt_or_raw(key) for key in self._properties}

    def _decrypt_or_raw(self, key: str) -> str:
        raw = self._properties[key]
        ciphertext = unwrap_encrypted(raw)
        try:
            return self._encryptor.decrypt(raw if ciphertext is None else ciphertext)
        except DecryptionError as exc:
            if ciphertext is None:
                logger.debug(_DECRYPTION_FAILURE_MESSAGE + " (%s)", key, exc)
            elif logger.isEnabledFor(logging.DEBUG):
                logger.debug(_DECRYPTION_FAILURE_MESSAGE, key, exc_info=exc)
            else:
                logger.warning(_DECRYPTION_FAILURE_MESSAGE + " (%s)", key, exc)
            return raw
