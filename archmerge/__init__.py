"""
archmerge - merge directories and archives into one output tree.

Path collisions are resolved by an ordered chain of merge strategies,
falling back to content-based deduplication.
"""

__version__ = "0.1.0"
__author__ = "archmerge Team"

from archmerge.merge.engine import MergeEngine, merge

__all__ = ["MergeEngine", "__version__", "merge"]
