"""Foundation types for the config module.

Provides sentinel values, exception classes, and the Secret wrapper type.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Undefined:
    """Sentinel for missing config values (distinct from ``None``)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Base exception for config-related errors."""


class UndefinedValueError(ConfigError):
    """Raised when a required setting is missing."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Configuration key '{key}' is required but not set.")


class DecryptionError(ConfigError):
    """Raised when a value is not valid ciphertext for the configured password.

    This is an expected condition: callers resolving property values recover
    from it by using the raw value.
    """


class SourceUnavailableError(ConfigError):
    """Raised when a candidate property source cannot be opened or parsed."""

    def __init__(self, location: str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Could not read properties from '{location}': {reason}")


# ---------------------------------------------------------------------------
# Secret
# ---------------------------------------------------------------------------


class Secret(Generic[T]):
    """A password or key that prints as ``***``.

    Truthiness follows the wrapped value, so an empty password counts as unset.
    The real value is only available through ``secret_value``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)

    @property
    def secret_value(self) -> T:
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        return "Secret('***')"

    def __str__(self) -> str:
        return "***"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Secret):
            return bool(self._value == other._value)
        return NotImplemented

    def __bool__(self) -> bool:
        return bool(self._value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        # Validate the raw value against the type argument, then wrap it.
        args = get_args(source_type)
        inner_schema = handler.generate_schema(args[0] if args else Any)
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_after_validator_function(cls, inner_schema),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(lambda _: "***"),
        )
