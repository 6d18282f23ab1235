"""
Error types for archmerge.

Per-group errors (ConflictError, StrategyError) are caught by the engine and
recorded as outcomes. Only MergeFailed and InvalidSourceError reach callers.
"""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archmerge.merge.engine import GroupOutcome


class MergeError(Exception):
    """Base class for all merge errors."""


class InvalidSourceError(MergeError):
    """A source is neither a directory nor a readable archive."""

    def __init__(self, source: Path, reason: str = "not a directory or archive"):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid merge source '{source}': {reason}")


class ConflictError(MergeError):
    """Several entries share a file path but differ in content."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Multiple entries found at '{path}'")


class StrategyError(MergeError):
    """A strategy failed for a reason other than a content conflict."""

    def __init__(self, path: str, strategy: str, cause: BaseException):
        self.path = path
        self.strategy = strategy
        self.cause = cause
        super().__init__(f"Strategy '{strategy}' failed at '{path}': {cause}")


class MergeFailed(MergeError):
    """Terminal error raised when one or more groups could not be merged."""

    def __init__(self, failures: list["GroupOutcome"]):
        self.failures = failures
        paths = ", ".join(f"'{f.path}'" for f in failures)
        super().__init__(
            f"Failed to merge all inputs ({len(failures)} conflicting paths: {paths}). "
            "Merge strategies can be used to resolve conflicts."
        )

    @property
    def paths(self) -> list[str]:
        """Normalized paths of every failed group."""
        return [f.path for f in self.failures]
