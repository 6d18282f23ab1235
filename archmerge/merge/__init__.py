"""
Merge Module for archmerge

Combines sources into one target directory:
- EntryPath / Entry: normalized, separator-independent entry paths
- collect_entries: directory and archive expansion
- Strategy: path-claiming conflict resolution policies
- MergeEngine: grouping, dispatch and failure aggregation
"""

from archmerge.merge.collector import (
    ClassifiedSource,
    SourceKind,
    classify_source,
    collect_entries,
)
from archmerge.merge.engine import (
    GroupOutcome,
    GroupPlan,
    MergeEngine,
    MergeResult,
    group_entries,
    merge,
)
from archmerge.merge.errors import (
    ConflictError,
    InvalidSourceError,
    MergeError,
    MergeFailed,
    StrategyError,
)
from archmerge.merge.paths import Entry, EntryPath, PathMatcher
from archmerge.merge.strategies import (
    DEDUPLICATE,
    DeduplicateStrategy,
    DiagnosticSink,
    DiscardStrategy,
    FunctionStrategy,
    Strategy,
    create_strategy,
    discard,
    effective_strategies,
    select_strategy,
)

__all__ = [
    # Paths
    "Entry",
    "EntryPath",
    "PathMatcher",
    # Collector
    "ClassifiedSource",
    "SourceKind",
    "classify_source",
    "collect_entries",
    # Strategies
    "DEDUPLICATE",
    "DeduplicateStrategy",
    "DiagnosticSink",
    "DiscardStrategy",
    "FunctionStrategy",
    "Strategy",
    "create_strategy",
    "discard",
    "effective_strategies",
    "select_strategy",
    # Errors
    "ConflictError",
    "InvalidSourceError",
    "MergeError",
    "MergeFailed",
    "StrategyError",
    # Engine
    "GroupOutcome",
    "GroupPlan",
    "MergeEngine",
    "MergeResult",
    "group_entries",
    "merge",
]
