"""Cast helpers for setting values.

These callables transform raw string values from environment variables or
process properties into the shape the resolver needs.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence


# ---------------------------------------------------------------------------
# Csv
# ---------------------------------------------------------------------------


class Csv:
    """Split a string into a list, with optional per-element casting.

    Empty elements are dropped, so an empty string yields an empty list.

    >>> Csv()("a, b, c")
    ['a', 'b', 'c']
    >>> Csv()("")
    []
    """

    def __init__(
        self,
        cast: Callable[[str], Any] = str,
        delimiter: str = ",",
        strip: bool = True,
    ) -> None:
        self.cast = cast
        self.delimiter = delimiter
        self.strip = strip

    def __call__(self, value: Any) -> list[Any]:
        if isinstance(value, (list, tuple)):
            return list(value)

        parts = str(value).split(self.delimiter)
        if self.strip:
            parts = [p.strip() for p in parts]
        return [self.cast(p) for p in parts if p]


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class Choices:
    """Validate that a value is one of a fixed set of choices.

    >>> Choices(["PBEWithMD5AndDES"])("PBEWithMD5AndDES")
    'PBEWithMD5AndDES'
    """

    def __init__(
        self,
        choices: Sequence[Any],
        cast: Callable[[Any], Any] = str,
    ) -> None:
        self.choices = choices
        self.cast = cast

    def __call__(self, value: Any) -> Any:
        casted = self.cast(value)
        if casted not in self.choices:
            raise ValueError(
                f"{casted!r} is not a valid choice. Must be one of {list(self.choices)}"
            )
        return casted
