"""
Entry paths for archmerge.

EntryPath normalizes a relative path into a separator-independent form so
that entries from different sources and platforms group onto the same
merge target.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, eq=False)
class EntryPath:
    """
    Normalized relative path of a merge entry.

    Two paths are equal when their normalized forms are equal, regardless of
    the separator used to build them.

    Example:
        >>> EntryPath.from_raw("a\\\\b\\\\c.txt", False, separator="\\\\").normalized
        'a/b/c.txt'
    """

    raw: str
    segments: tuple[str, ...]
    is_directory: bool
    normalized: str = field(init=False)

    def __post_init__(self) -> None:
        suffix = "/" if self.is_directory else ""
        object.__setattr__(self, "normalized", "/".join(self.segments) + suffix)

    @classmethod
    def from_raw(
        cls,
        raw: str,
        is_directory: bool,
        separator: str = os.sep,
    ) -> "EntryPath":
        """Split a raw path on a single separator character."""
        if len(separator) != 1:
            raise ValueError(f"Separator must be a single character, got {separator!r}")
        segments = tuple(s for s in raw.split(separator) if s)
        return cls(raw=raw, segments=segments, is_directory=is_directory)

    @property
    def name(self) -> str:
        return self.segments[-1] if self.segments else ""

    def matches(self, matcher: "str | re.Pattern[str] | PathMatcher") -> bool:
        """Match a literal (exact) or a compiled pattern (unanchored search)."""
        return PathMatcher.of(matcher)(self)

    def resolve(self, base: Path) -> Path:
        """Location of this path under base, built from the raw path."""
        return Path(base) / self.raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntryPath):
            return NotImplemented
        return self.normalized == other.normalized

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __str__(self) -> str:
        return self.normalized


@dataclass(frozen=True)
class Entry:
    """One occurrence of a path in one source."""

    path: EntryPath
    location: Path
    source: Path

    @classmethod
    def create(
        cls,
        raw: str,
        location: Path,
        source: Path,
        separator: str = os.sep,
    ) -> "Entry":
        return cls(
            path=EntryPath.from_raw(raw, location.is_dir(), separator=separator),
            location=location,
            source=source,
        )


class PathMatcher:
    """
    Predicate over entry paths.

    Built either from a literal, compared for equality with the normalized
    form, or from a regular expression searched anywhere within it.
    """

    def __init__(self, description: str, predicate):
        self.description = description
        self._predicate = predicate

    @classmethod
    def exact(cls, literal: str) -> "PathMatcher":
        return cls(f"exact({literal!r})", lambda p: p.normalized == literal)

    @classmethod
    def search(cls, pattern: "str | re.Pattern[str]") -> "PathMatcher":
        compiled = re.compile(pattern)
        return cls(
            f"search({compiled.pattern!r})",
            lambda p: compiled.search(p.normalized) is not None,
        )

    @classmethod
    def of(cls, value: "str | re.Pattern[str] | PathMatcher") -> "PathMatcher":
        """Plain strings are literals; compiled patterns are searched."""
        if isinstance(value, PathMatcher):
            return value
        if isinstance(value, re.Pattern):
            return cls.search(value)
        if isinstance(value, str):
            return cls.exact(value)
        raise TypeError(f"Cannot build a path matcher from {type(value).__name__}")

    def __call__(self, path: EntryPath) -> bool:
        return bool(self._predicate(path))

    def __repr__(self) -> str:
        return f"PathMatcher.{self.description}"
