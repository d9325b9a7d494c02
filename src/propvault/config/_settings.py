"""Typed settings groups using Pydantic BaseModel.

Subclass ``SettingsGroup`` and declare fields + a ``Meta`` inner class to map
setting keys automatically::

    class VaultSettings(SettingsGroup):
        class Meta:
            prefix = "vault"

        address: str = "http://localhost:8200"
        token: Secret[str] | None = None

    cfg = VaultSettings.load()
    cfg.address     # read from VAULT_ADDRESS env / "vault.address" property
    cfg.token       # Secret instance, repr shows '***'
"""

from __future__ import annotations

from typing import Any, Collection

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._casters import Choices
from ._encryptor import ALGORITHMS, DEFAULT_ALGORITHM, DEFAULT_ITERATIONS
from ._environment import Environment
from ._reader import setting
from ._types import Secret

#: Candidate locations tried when ``jasypt.properties`` is not set.
DEFAULT_PROPERTIES = "classpath:application.properties,config/application.properties"


class SettingsGroup(BaseModel):
    """Base class for declarative, typed settings groups."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    class Meta:
        prefix: str = ""

    @classmethod
    def setting_key(cls, field_name: str) -> str:
        prefix = getattr(cls.Meta, "prefix", "")
        return f"{prefix}.{field_name}" if prefix else field_name

    @classmethod
    def load(
        cls,
        environment: Environment | None = None,
        *,
        skip: Collection[str] = (),
    ) -> "SettingsGroup":
        """Load setting values and return a validated instance.

        Resolution per field:
        1. Environment variable (``env_var_name("{prefix}.{field}")``)
        2. Process property ``{prefix}.{field}``
        3. Omit, letting Pydantic use the field default or raise ``ValidationError``

        Fields named in *skip* are not read and always take their default.
        """
        raw_data: dict[str, Any] = {}

        for field_name in cls.model_fields:
            if field_name in skip:
                continue
            value = setting(cls.setting_key(field_name), default=None, environment=environment)
            if value is not None:
                raw_data[field_name] = value

        return cls.model_validate(raw_data)


class EncryptionSettings(SettingsGroup):
    """Settings the encrypted properties source reads about itself."""

    class Meta:
        prefix = "jasypt"

    password: Secret[str] | None = None
    key: Secret[str] | None = None
    properties: str = DEFAULT_PROPERTIES
    algorithm: str = DEFAULT_ALGORITHM
    iterations: int = Field(default=DEFAULT_ITERATIONS, gt=0)

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        return Choices(ALGORITHMS)(value)
