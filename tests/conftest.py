"""Pytest configuration and shared fixtures."""

import os
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Set test environment
os.environ.setdefault("ARCHMERGE_LOG_LEVEL", "DEBUG")


class RecordingSink:
    """Diagnostic sink that keeps every message for assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def debug(self, message: str) -> None:
        self.records.append(("debug", message))

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture
def mock_settings() -> Generator:
    """Clear cached settings around a test."""
    from archmerge.core.config import clear_settings_cache

    clear_settings_cache()

    yield

    clear_settings_cache()


@pytest.fixture
def settings(tmp_path):
    """Settings with scratch space inside the test directory."""
    from archmerge.core.config import Settings

    return Settings(
        archmerge_scratch_dir=str(tmp_path / "scratch"),
        archmerge_max_workers=1,
        archmerge_hash_algorithm="sha256",
    )


@pytest.fixture
def sink() -> RecordingSink:
    """Provide a recording diagnostic sink."""
    return RecordingSink()


@pytest.fixture
def make_tree(tmp_path) -> Callable[[str, dict[str, bytes | None]], Path]:
    """
    Build a directory tree.

    Keys are forward-slash relative paths; a None value creates a directory.
    """

    def _make(name: str, files: dict[str, bytes | None]) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(content)
        return root

    return _make


@pytest.fixture
def make_zip(tmp_path) -> Callable[[str, dict[str, bytes | None]], Path]:
    """
    Build a ZIP archive.

    Keys are archive member names; a None value adds a directory member.
    """

    def _make(name: str, files: dict[str, bytes | None]) -> Path:
        archive = tmp_path / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w") as zf:
            for member, content in files.items():
                if content is None:
                    zf.writestr(member.rstrip("/") + "/", b"")
                else:
                    zf.writestr(member, content)
        return archive

    return _make


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes | None]]:
    """Map every path under a root to its bytes, or None for directories."""

    def _snapshot(root: Path) -> dict[str, bytes | None]:
        result: dict[str, bytes | None] = {}
        for path in sorted(root.rglob("*")):
            relative = path.relative_to(root).as_posix()
            result[relative] = None if path.is_dir() else path.read_bytes()
        return result

    return _snapshot


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
