"""
Merge strategies for archmerge.

A strategy claims paths through a predicate and resolves every group of
entries that lands on a claimed path. Strategies are stateless and can be
reused across merges.
"""

import re
import shutil
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from archmerge.merge.errors import ConflictError
from archmerge.merge.hashing import SUPPORTED_ALGORITHMS, hash_file
from archmerge.merge.paths import Entry, EntryPath, PathMatcher


class DiagnosticSink(Protocol):
    """Leveled message sink. The loguru logger satisfies it."""

    def debug(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class Strategy(ABC):
    """Base class for merge strategies."""

    name: str = "strategy"

    @abstractmethod
    def claims(self, path: EntryPath) -> bool:
        """Check if this strategy handles the path. Must be side-effect free."""
        pass

    @abstractmethod
    def merge(
        self,
        path: EntryPath,
        entries: Sequence[Entry],
        target: Path,
        log: DiagnosticSink,
    ) -> None:
        """
        Resolve a group of entries sharing one path.

        Args:
            path: Normalized path of the group
            entries: Every entry at that path, in collection order
            target: Root of the merge output
            log: Diagnostic sink

        Raises:
            MergeError or any exception when the path cannot be resolved
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


def copy_first(entries: Sequence[Entry], target: Path) -> None:
    """Copy the first entry of a group to its location under target."""
    if not entries:
        return
    entry = entries[0]
    destination = entry.path.resolve(target)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(entry.location, destination)


class DiscardStrategy(Strategy):
    """Drops every entry on a matching path."""

    name = "discard"

    def __init__(self, matcher: PathMatcher):
        self.matcher = matcher

    def claims(self, path: EntryPath) -> bool:
        return self.matcher(path)

    def merge(
        self,
        path: EntryPath,
        entries: Sequence[Entry],
        target: Path,
        log: DiagnosticSink,
    ) -> None:
        for entry in entries:
            log.debug(f"Discarding entry at '{entry.path}' from {entry.source.name}")

    def __repr__(self) -> str:
        return f"<DiscardStrategy {self.matcher!r}>"


class DeduplicateStrategy(Strategy):
    """
    Default strategy, claims every path.

    Rules:
    1. A single entry is copied (files) or created (directories)
    2. Duplicate directories are created once
    3. Duplicate files with identical content are copied once
    4. Duplicate files with differing content raise ConflictError
    """

    name = "deduplicate"

    def __init__(self, algorithm: str = "sha256"):
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported algorithm: {algorithm}. Available: {list(SUPPORTED_ALGORITHMS)}"
            )
        self.algorithm = algorithm

    def claims(self, path: EntryPath) -> bool:
        return True

    def merge(
        self,
        path: EntryPath,
        entries: Sequence[Entry],
        target: Path,
        log: DiagnosticSink,
    ) -> None:
        if len(entries) > 1:
            if path.is_directory:
                log.debug(f"Ignoring duplicate directories at '{path}'")
                path.resolve(target).mkdir(parents=True, exist_ok=True)
                return

            for entry in entries:
                log.debug(f"Matching entry at '{entry.path}' from {entry.source.name}")

            hashes = {hash_file(entry.location, self.algorithm) for entry in entries}
            if len(hashes) > 1:
                raise ConflictError(path.normalized)

            log.debug(f"Identical duplicates found at '{path}'")
            copy_first(entries, target)
        elif path.is_directory:
            path.resolve(target).mkdir(parents=True, exist_ok=True)
        else:
            copy_first(entries, target)


class FunctionStrategy(Strategy):
    """Strategy assembled from a claim predicate and a merge function."""

    def __init__(
        self,
        name: str,
        claim: Callable[[EntryPath], bool],
        run: Callable[[EntryPath, Sequence[Entry], Path, DiagnosticSink], None],
    ):
        self.name = name
        self._claim = claim
        self._run = run

    def claims(self, path: EntryPath) -> bool:
        return bool(self._claim(path))

    def merge(
        self,
        path: EntryPath,
        entries: Sequence[Entry],
        target: Path,
        log: DiagnosticSink,
    ) -> None:
        self._run(path, entries, target, log)


DEDUPLICATE = DeduplicateStrategy()


def create_strategy(
    name: str,
    claim: Callable[[EntryPath], bool],
    run: Callable[[EntryPath, Sequence[Entry], Path, DiagnosticSink], None],
) -> Strategy:
    """Build a strategy from two plain callables."""
    return FunctionStrategy(name, claim, run)


def discard(matcher: "str | re.Pattern[str] | PathMatcher") -> Strategy:
    """
    Discard strategy for a literal path or a compiled pattern.

    Example:
        >>> discard(re.compile(r".*\\.tmp$")).claims(EntryPath.from_raw("x.tmp", False))
        True
    """
    return DiscardStrategy(PathMatcher.of(matcher))


def effective_strategies(
    strategies: Sequence[Strategy],
    fallback: Strategy = DEDUPLICATE,
) -> list[Strategy]:
    """Caller strategies followed by the fallback sentinel."""
    return [*strategies, fallback]


def select_strategy(
    path: EntryPath,
    strategies: Sequence[Strategy],
    fallback: Strategy = DEDUPLICATE,
) -> Strategy:
    """First strategy in the effective list that claims the path."""
    return next(s for s in effective_strategies(strategies, fallback) if s.claims(path))
