"""
Merge Engine for archmerge

Combines the entries of several sources into one target directory:
- Collects entries from directories and archives
- Groups entries by normalized path
- Dispatches each group to the first strategy that claims it
- Fails the whole merge, removing the target, if any group failed
"""

import shutil
import tempfile
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from archmerge.core.config import Settings, get_settings
from archmerge.merge.collector import collect_entries
from archmerge.merge.errors import MergeError, MergeFailed, StrategyError
from archmerge.merge.hashing import hash_file
from archmerge.merge.paths import Entry, EntryPath
from archmerge.merge.strategies import (
    DeduplicateStrategy,
    DiagnosticSink,
    Strategy,
    effective_strategies,
)


@dataclass(frozen=True)
class GroupOutcome:
    """Outcome of resolving one group."""

    path: str
    strategy: str
    entry_count: int
    error: MergeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "strategy": self.strategy,
            "entry_count": self.entry_count,
            "ok": self.ok,
            "error": str(self.error) if self.error else None,
            "error_type": type(self.error).__name__ if self.error else None,
        }


@dataclass
class GroupPlan:
    """Preview of how a group would be resolved."""

    path: str
    strategy: str
    entry_count: int
    sources: list[str] = field(default_factory=list)
    conflicting: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "strategy": self.strategy,
            "entry_count": self.entry_count,
            "sources": self.sources,
            "conflicting": self.conflicting,
        }


@dataclass
class MergeResult:
    """Result of a successful merge."""

    target: Path
    outcomes: list[GroupOutcome] = field(default_factory=list)

    @property
    def group_count(self) -> int:
        return len(self.outcomes)

    @property
    def entry_count(self) -> int:
        return sum(o.entry_count for o in self.outcomes)

    def strategy_counts(self) -> dict[str, int]:
        """Number of groups handled by each strategy."""
        counts: dict[str, int] = {}
        for outcome in self.outcomes:
            counts[outcome.strategy] = counts.get(outcome.strategy, 0) + 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "target": str(self.target),
            "group_count": self.group_count,
            "entry_count": self.entry_count,
            "strategy_counts": self.strategy_counts(),
        }


def group_entries(entries: Sequence[Entry]) -> dict[EntryPath, list[Entry]]:
    """Partition entries by normalized path, keeping first-seen order."""
    grouped: dict[EntryPath, list[Entry]] = {}

    for entry in entries:
        if entry.path not in grouped:
            grouped[entry.path] = []
        grouped[entry.path].append(entry)

    return grouped


class MergeEngine:
    """
    Engine for merging sources into a target directory.

    Usage:
        engine = MergeEngine(strategies=[discard(re.compile(r"\\.tmp$"))])
        try:
            result = engine.merge(sources, target)
        except MergeFailed as e:
            for path in e.paths:
                # Add a strategy for the path
                pass

    The engine alone owns cleanup: strategies may leave partial output for
    their own group, which is removed together with the target on failure.
    """

    def __init__(
        self,
        strategies: Sequence[Strategy] = (),
        log: DiagnosticSink = logger,
        settings: Settings | None = None,
        max_workers: int | None = None,
    ):
        self.settings = settings or get_settings()
        self.strategies = list(strategies)
        self.log = log
        if max_workers is None:
            max_workers = self.settings.archmerge_max_workers
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self.fallback = DeduplicateStrategy(self.settings.archmerge_hash_algorithm)

    def merge(self, sources: Sequence[Path | str], target: Path | str) -> MergeResult:
        """
        Merge all sources into target.

        Args:
            sources: Directories or archives, in priority order
            target: Output directory

        Returns:
            MergeResult describing every resolved group

        Raises:
            MergeFailed: If any group could not be resolved. The target is
                removed before raising.
            InvalidSourceError: If a source cannot be read.
        """
        target = Path(target)
        source_paths = [Path(s) for s in sources]
        self.log.info(f"Merging {len(source_paths)} sources into {target}")

        with self._scratch() as scratch:
            entries = collect_entries(source_paths, scratch, self.log)
            groups = group_entries(entries)
            self.log.debug(f"Grouped {len(entries)} entries into {len(groups)} paths")

            target.mkdir(parents=True, exist_ok=True)
            try:
                outcomes = self._resolve_all(groups, target)
            except BaseException:
                shutil.rmtree(target, ignore_errors=True)
                raise

        failures = [o for o in outcomes if not o.ok]
        if failures:
            if target.exists():
                shutil.rmtree(target)
            raise MergeFailed(failures)

        result = MergeResult(target=target, outcomes=outcomes)
        self.log.info(f"Merged {result.entry_count} entries into {result.group_count} paths")
        return result

    def plan(self, sources: Sequence[Path | str]) -> list[GroupPlan]:
        """
        Preview the merge without writing a target.

        Flags file groups that the fallback would reject because their
        contents differ.
        """
        plans = []

        with self._scratch() as scratch:
            entries = collect_entries([Path(s) for s in sources], scratch, self.log)
            groups = group_entries(entries)

            for path, entries in groups.items():
                strategy = self._select(path)
                plans.append(
                    GroupPlan(
                        path=path.normalized,
                        strategy=strategy.name,
                        entry_count=len(entries),
                        sources=[str(e.source) for e in entries],
                        conflicting=self._is_conflicting(path, entries, strategy),
                    )
                )

        return plans

    def _scratch(self) -> tempfile.TemporaryDirectory:
        parent = self.settings.archmerge_scratch_dir
        if parent:
            Path(parent).mkdir(parents=True, exist_ok=True)
        return _ScratchDirectory(prefix="archmerge-", dir=parent)

    def _resolve_all(
        self,
        groups: dict[EntryPath, list[Entry]],
        target: Path,
    ) -> list[GroupOutcome]:
        """Resolve every group, sequentially or on a thread pool."""
        items = list(groups.items())

        if self.max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as ex:
                return list(ex.map(lambda item: self._resolve_group(*item, target), items))

        return [self._resolve_group(path, entries, target) for path, entries in items]

    def _resolve_group(
        self,
        path: EntryPath,
        entries: list[Entry],
        target: Path,
    ) -> GroupOutcome:
        """Run the claiming strategy, converting any error into an outcome."""
        try:
            strategy = self._select(path)
        except StrategyError as e:
            self.log.error(str(e))
            return GroupOutcome(path.normalized, e.strategy, len(entries), e)

        try:
            strategy.merge(path, entries, target, self.log)
        except MergeError as e:
            self.log.error(str(e))
            return GroupOutcome(path.normalized, strategy.name, len(entries), e)
        except Exception as e:
            error = StrategyError(path.normalized, strategy.name, e)
            self.log.error(str(error))
            return GroupOutcome(path.normalized, strategy.name, len(entries), error)

        return GroupOutcome(path.normalized, strategy.name, len(entries))

    def _select(self, path: EntryPath) -> Strategy:
        """First claiming strategy, wrapping a failing claim as StrategyError."""
        for strategy in effective_strategies(self.strategies, self.fallback):
            try:
                claimed = strategy.claims(path)
            except Exception as e:
                raise StrategyError(path.normalized, strategy.name, e) from e
            if claimed:
                return strategy
        return self.fallback

    def _is_conflicting(
        self,
        path: EntryPath,
        entries: list[Entry],
        strategy: Strategy,
    ) -> bool:
        if strategy is not self.fallback or path.is_directory or len(entries) < 2:
            return False
        algorithm = self.settings.archmerge_hash_algorithm
        return len({hash_file(e.location, algorithm) for e in entries}) > 1


class _ScratchDirectory(tempfile.TemporaryDirectory):
    """Temporary directory yielding a Path instead of a string."""

    def __enter__(self) -> Path:  # type: ignore[override]
        return Path(self.name)


def merge(
    sources: Sequence[Path | str],
    target: Path | str,
    strategies: Sequence[Strategy] = (),
    log: DiagnosticSink = logger,
    *,
    settings: Settings | None = None,
) -> MergeResult:
    """Convenience function to run a single merge.

    Args:
        sources: Directories or archives, in priority order
        target: Output directory
        strategies: Strategies tried in order before deduplication
        log: Diagnostic sink

    Returns:
        MergeResult for the merge.
    """
    engine = MergeEngine(strategies=strategies, log=log, settings=settings)
    return engine.merge(sources, target)
