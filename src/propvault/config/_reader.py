"""Base settings access: ``setting()`` reads the values that configure the resolver.

Lookup order:
1. Environment variable (name derived from the key, see ``env_var_name``)
2. Process property (the literal key)
3. Default value (returned as-is, **not** passed through ``cast``)
4. Raise ``UndefinedValueError``

This never consults a loaded property file, so the resolver can read its own
settings before any file is loaded.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from ._environment import Environment
from ._types import UNDEFINED, UndefinedValueError, _Undefined

_ENV_NAME_INVALID = re.compile(r"[^a-zA-Z0-9_]")

# ---------------------------------------------------------------------------
# Module-level environment management
# ---------------------------------------------------------------------------

_active_environment: Environment | None = None


def set_environment(environment: Environment | None) -> None:
    """Set the module-level environment."""
    global _active_environment
    _active_environment = environment


def get_environment() -> Environment | None:
    """Return the current module-level environment (may be ``None``)."""
    return _active_environment


def _auto_environment() -> Environment:
    """Lazily create a ``ProcessEnvironment`` if none is set."""
    global _active_environment
    if _active_environment is None:
        from ._process_adapter import ProcessEnvironment

        _active_environment = ProcessEnvironment()
    return _active_environment


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def env_var_name(key: str) -> str:
    """Derive the environment variable name for a config key.

    >>> env_var_name("jasypt.password")
    'JASYPT_PASSWORD'
    >>> env_var_name("my-app.db-url")
    'MY_APP_DB_URL'
    """
    return _ENV_NAME_INVALID.sub("_", key).upper()


def lookup_overlay(environment: Environment, key: str) -> str | None:
    """Return the environment or process-property value for *key*, if any."""
    env_value = environment.get_env(env_var_name(key))
    if env_value is not None:
        return env_value
    return environment.get_property(key)


def _identity(value: Any) -> Any:
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def setting(
    key: str,
    *,
    default: Any = UNDEFINED,
    cast: Callable[[Any], Any] | None = None,
    environment: Environment | None = None,
) -> Any:
    """Read a setting from the environment or the process-property store.

    Parameters
    ----------
    key:
        Setting key, e.g. ``"jasypt.password"``. The environment variable
        checked is ``env_var_name(key)``.
    default:
        Fallback value if the key is not found anywhere. Returned **as-is**
        (not passed through *cast*).
    cast:
        Callable to coerce the raw value.
    environment:
        Per-call environment override. Falls back to the module-level
        environment (or auto-creates a ``ProcessEnvironment``).
    """
    active = environment or _auto_environment()
    caster = cast or _identity

    value = lookup_overlay(active, key)
    if value is not None:
        return caster(value)

    if not isinstance(default, _Undefined):
        return default

    raise UndefinedValueError(key)
