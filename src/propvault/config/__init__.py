"""Layered configuration with transparently decrypted property values.

Looks values up in the environment, then the process-property store, then a
property file whose values may be Jasypt-encrypted. Decryption is
opportunistic: values that cannot be decrypted are returned as stored.
"""

from ._encryptor import (
    ALGORITHMS,
    PBE_HMAC_SHA512_AES_256,
    PBE_MD5_DES,
    Encryptor,
    PBEStringEncryptor,
    unwrap_encrypted,
    wrap_encrypted,
)
from ._environment import Environment, FakeEnvironment
from ._factory import EncryptedPropertiesSourceFactory
from ._loader import NO_SOURCE, LoadedProperties, SourceLoader, SourceLocation, parse_candidates
from ._process_adapter import ProcessEnvironment, clear_property, get_property, set_property
from ._properties import dump_properties, format_entry, parse_properties
from ._reader import env_var_name, setting
from ._settings import EncryptionSettings, SettingsGroup
from ._source import (
    ConfigSource,
    EncryptedPropertiesSource,
    PasswordResolver,
    pbe_encryptor_factory,
)
from ._testing import override_environment
from ._types import (
    ConfigError,
    DecryptionError,
    Secret,
    SourceUnavailableError,
    UndefinedValueError,
)

__all__ = [
    # Core
    "EncryptedPropertiesSource",
    "EncryptedPropertiesSourceFactory",
    "ConfigSource",
    "setting",
    "env_var_name",
    # Errors
    "ConfigError",
    "DecryptionError",
    "SourceUnavailableError",
    "UndefinedValueError",
    # Encryption
    "Encryptor",
    "PBEStringEncryptor",
    "PasswordResolver",
    "pbe_encryptor_factory",
    "ALGORITHMS",
    "PBE_MD5_DES",
    "PBE_HMAC_SHA512_AES_256",
    "wrap_encrypted",
    "unwrap_encrypted",
    # Loading
    "SourceLoader",
    "SourceLocation",
    "LoadedProperties",
    "NO_SOURCE",
    "parse_candidates",
    "parse_properties",
    "format_entry",
    "dump_properties",
    # Settings
    "EncryptionSettings",
    "SettingsGroup",
    "Secret",
    # Environment
    "Environment",
    "ProcessEnvironment",
    "set_property",
    "get_property",
    "clear_property",
    # Testing
    "override_environment",
    "FakeEnvironment",
]
