"""
Entry collection for archmerge.

Expands every source into an effective root and lists its entries:
- Directories are used in place
- Archives (detected by content, not by name) are extracted into scratch space
"""

import hashlib
import os
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger

from archmerge.merge.errors import InvalidSourceError
from archmerge.merge.paths import Entry
from archmerge.merge.strategies import DiagnosticSink


class SourceKind(str, Enum):
    """How a source contributes entries."""

    DIRECTORY = "directory"
    ARCHIVE = "archive"


@dataclass(frozen=True)
class ClassifiedSource:
    """A source together with its detected kind."""

    source: Path
    kind: SourceKind


def classify_source(source: Path) -> ClassifiedSource:
    """
    Classify a source as a directory or an archive.

    Raises:
        InvalidSourceError: If the source is missing or is a plain file
            that is not a ZIP archive.
    """
    source = Path(source)
    if source.is_dir():
        return ClassifiedSource(source, SourceKind.DIRECTORY)
    if source.is_file():
        if zipfile.is_zipfile(source):
            return ClassifiedSource(source, SourceKind.ARCHIVE)
        raise InvalidSourceError(source, "file is not a ZIP archive")
    raise InvalidSourceError(source, "path does not exist")


def scratch_root_for(source: Path, scratch: Path) -> Path:
    """Deterministic extraction directory for an archive source."""
    canonical = str(Path(source).resolve())
    digest = hashlib.sha1(canonical.encode("utf-8")).hexdigest()[:16]
    return scratch / digest / Path(source).name


def expand_source(
    classified: ClassifiedSource,
    scratch: Path,
    log: DiagnosticSink = logger,
) -> Path:
    """Return the effective root for a source, extracting archives."""
    if classified.kind == SourceKind.DIRECTORY:
        return classified.source

    root = scratch_root_for(classified.source, scratch)
    root.mkdir(parents=True, exist_ok=True)
    log.debug(f"Extracting {classified.source} to {root}")
    try:
        with zipfile.ZipFile(classified.source) as archive:
            archive.extractall(root)
    except zipfile.BadZipFile as e:
        raise InvalidSourceError(classified.source, f"corrupt archive: {e}") from e
    return root


def list_entries(root: Path, source: Path) -> list[Entry]:
    """List every file and directory below root, excluding root itself."""
    entries: list[Entry] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current = Path(dirpath)
        for name in dirnames + sorted(filenames):
            location = current / name
            relative = os.path.relpath(location, root)
            entries.append(Entry.create(relative, location.absolute(), source))

    return entries


def collect_entries(
    sources: list[Path],
    scratch: Path,
    log: DiagnosticSink = logger,
) -> list[Entry]:
    """
    Collect entries from all sources.

    Args:
        sources: Directories or archives, in priority order
        scratch: Directory used for archive extraction
        log: Diagnostic sink for progress lines

    Returns:
        All entries, in source order then walk order
    """
    entries: list[Entry] = []

    for source in sources:
        classified = classify_source(Path(source))
        root = expand_source(classified, scratch, log)
        source_entries = list_entries(root, classified.source)
        log.debug(
            f"Collected {len(source_entries)} entries from {classified.source} "
            f"({classified.kind.value})"
        )
        entries.extend(source_entries)

    return entries
