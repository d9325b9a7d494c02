"""Locate and load the base property file from an ordered candidate list.

Candidates are tried in order and the first one that opens and parses wins;
files are never merged. A candidate prefixed with ``classpath:`` is a bundled
resource looked up under the loader's resource roots (``sys.path`` by
default); anything else is a filesystem path.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from ._casters import Csv
from ._properties import parse_properties
from ._types import SourceUnavailableError

logger = logging.getLogger(__name__)

CLASSPATH_PREFIX = "classpath:"

#: Source identifier reported when no candidate could be loaded.
NO_SOURCE = "n/a"

ResourceRoot = Union[str, os.PathLike, Traversable]


@dataclass(frozen=True)
class SourceLocation:
    """One candidate location, as written in the candidate list."""

    raw: str
    path: str
    bundled: bool

    @classmethod
    def parse(cls, raw: str) -> "SourceLocation":
        if raw.startswith(CLASSPATH_PREFIX):
            return cls(raw=raw, path=raw[len(CLASSPATH_PREFIX) :].lstrip("/"), bundled=True)
        return cls(raw=raw, path=raw, bundled=False)

    def __str__(self) -> str:
        return self.raw


def decode_properties(data: bytes) -> str:
    """Decode property-file bytes as UTF-8, falling back to ISO-8859-1.

    >>> decode_properties(b"greeting=caf\\xe9")
    'greeting=café'
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def parse_candidates(value: str) -> list[SourceLocation]:
    """Split a comma-separated candidate string into locations.

    >>> [str(c) for c in parse_candidates("classpath:a.properties, b.properties")]
    ['classpath:a.properties', 'b.properties']
    """
    return Csv(cast=SourceLocation.parse)(value)


@dataclass(frozen=True)
class LoadedProperties:
    """A read-only property set and the candidate it came from."""

    properties: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    source: str = NO_SOURCE

    @property
    def found(self) -> bool:
        return self.source != NO_SOURCE


class SourceLoader:
    """Loads the first readable property file from a candidate list."""

    def __init__(self, resource_roots: Sequence[ResourceRoot] | None = None) -> None:
        self._resource_roots = None if resource_roots is None else list(resource_roots)

    @property
    def resource_roots(self) -> list[ResourceRoot]:
        if self._resource_roots is not None:
            return self._resource_roots
        return list(sys.path)

    def load(self, candidates: str | Sequence[SourceLocation]) -> LoadedProperties:
        """Return the properties of the first candidate that can be read.

        Never raises for unreadable candidates. If none succeeds, the result
        is empty and its ``source`` is ``NO_SOURCE``.
        """
        if isinstance(candidates, str):
            candidates = parse_candidates(candidates)

        for location in candidates:
            logger.info("Trying to load properties from %s", location)
            result = self._read_candidate(location)
            if isinstance(result, SourceUnavailableError):
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Could not open input stream for %s", location, exc_info=result)
                else:
                    logger.info("Could not open input stream for %s: %s", location, result.reason)
                continue

            noun = "property" if len(result) == 1 else "properties"
            logger.info("Loaded %d %s from %s", len(result), noun, location)
            return LoadedProperties(MappingProxyType(result), location.raw)

        logger.warning(
            "Could not read properties from any file in %s", [str(c) for c in candidates]
        )
        return LoadedProperties()

    # -- internals ----------------------------------------------------------

    def _read_candidate(self, location: SourceLocation) -> dict[str, str] | SourceUnavailableError:
        try:
            text = self._read_text(location)
            return parse_properties(text)
        except SourceUnavailableError as exc:
            return exc
        except (OSError, ValueError) as exc:
            error = SourceUnavailableError(location.raw, str(exc))
            error.__cause__ = exc
            return error

    def _read_text(self, location: SourceLocation) -> str:
        if not location.bundled:
            return decode_properties(Path(location.path).read_bytes())

        parts = [p for p in location.path.split("/") if p]
        if not parts:
            raise SourceUnavailableError(location.raw, "empty resource name")

        for root in self.resource_roots:
            base = root if isinstance(root, Traversable) else Path(os.fspath(root) or ".")
            resource = base.joinpath(*parts)
            if resource.is_file():
                return decode_properties(resource.read_bytes())

        raise SourceUnavailableError(location.raw, "resource not found")
