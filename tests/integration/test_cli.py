"""
Tests for the archmerge CLI.
"""

import pytest
from loguru import logger
from typer.testing import CliRunner

from archmerge import __version__
from archmerge.cli.main import app

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch, mock_settings):
    """Point scratch space into the test directory."""
    monkeypatch.setenv("ARCHMERGE_SCRATCH_DIR", str(tmp_path / "scratch"))
    yield
    logger.remove()


class TestCLI:
    """Test cases for CLI commands."""

    def test_version(self):
        """Test --version output."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        """Test that commands are listed."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "merge" in result.output
        assert "plan" in result.output

    def test_merge_success(self, make_tree, tmp_path):
        """Test a successful merge."""
        one = make_tree("one", {"a.txt": b"a"})
        two = make_tree("two", {"b.txt": b"b"})
        target = tmp_path / "out"

        result = runner.invoke(app, ["merge", str(one), str(two), "--target", str(target)])

        assert result.exit_code == 0, result.output
        assert (target / "a.txt").read_bytes() == b"a"
        assert (target / "b.txt").read_bytes() == b"b"
        assert "merged successfully" in result.output

    def test_merge_conflict_exit_code(self, make_tree, tmp_path):
        """Test that conflicts exit with status 1 and list paths."""
        one = make_tree("one", {"a.txt": b"a"})
        two = make_tree("two", {"a.txt": b"b"})
        target = tmp_path / "out"

        result = runner.invoke(app, ["merge", str(one), str(two), "-t", str(target)])

        assert result.exit_code == 1
        assert "a.txt" in result.output
        assert not target.exists()

    def test_merge_with_discard(self, make_tree, tmp_path):
        """Test that --discard resolves a conflict."""
        one = make_tree("one", {"a.tmp": b"a", "keep.txt": b"k"})
        two = make_tree("two", {"a.tmp": b"b"})
        target = tmp_path / "out"

        result = runner.invoke(
            app, ["merge", str(one), str(two), "-t", str(target), "--discard", r"\.tmp$"]
        )

        assert result.exit_code == 0, result.output
        assert not (target / "a.tmp").exists()
        assert (target / "keep.txt").exists()

    def test_merge_with_discard_path(self, make_tree, tmp_path):
        """Test that --discard-path matches exactly."""
        one = make_tree("one", {"x/a.txt": b"a"})
        two = make_tree("two", {"x/a.txt": b"b"})

        result = runner.invoke(
            app,
            ["merge", str(one), str(two), "-t", str(tmp_path / "out"), "--discard-path", "x/a.txt"],
        )

        assert result.exit_code == 0, result.output

    def test_invalid_pattern(self, make_tree, tmp_path):
        """Test that a broken regular expression is a usage error."""
        one = make_tree("one", {"a.txt": b"a"})

        result = runner.invoke(app, ["merge", str(one), "-t", str(tmp_path / "o"), "-x", "("])

        assert result.exit_code != 0

    def test_workers_out_of_range(self, make_tree, tmp_path):
        """Test that worker counts outside 1..64 are rejected before merging."""
        one = make_tree("one", {"a.txt": b"a"})

        for workers in ("0", "65"):
            result = runner.invoke(
                app, ["merge", str(one), "-t", str(tmp_path / "out"), "-w", workers]
            )

            assert result.exit_code != 0
        assert not (tmp_path / "out").exists()

    def test_invalid_source(self, tmp_path):
        """Test that a missing source exits with status 2."""
        result = runner.invoke(
            app, ["merge", str(tmp_path / "missing"), "-t", str(tmp_path / "out")]
        )

        assert result.exit_code == 2
        assert not (tmp_path / "out").exists()

    def test_plan(self, make_tree, tmp_path):
        """Test that plan reports conflicts without writing."""
        one = make_tree("one", {"a.txt": b"a", "b.txt": b"b"})
        two = make_tree("two", {"a.txt": b"A"})

        result = runner.invoke(app, ["plan", str(one), str(two), "--duplicates"])

        assert result.exit_code == 0, result.output
        assert "a.txt" in result.output
        assert "b.txt" not in result.output
        assert "1 conflicting paths" in result.output
