"""Tests for ignore pattern compilation and matching."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from aicommit.git.ignore import IGNORE_FILE_NAME, IgnoreFileError, IgnoreMatcher, compile_pattern


@pytest.mark.unit
class TestCompilePattern:
	"""Test cases for single glob compilation."""

	@pytest.mark.parametrize(
		("pattern", "path", "expected"),
		[
			("*.log", "debug.log", True),
			("*.log", "logs/app.log", True),
			("*.log", "debug.logx", False),
			("build/**", "build/out/main.o", True),
			("docs/*.md", "docs/guide/intro.md", True),
			("file?.py", "file1.py", True),
			("file?.py", "file10.py", False),
			("[abc].txt", "b.txt", True),
			("[!abc].txt", "b.txt", False),
			("{Cargo,package}.lock", "package.lock", True),
			("{Cargo,package}.lock", "poetry.lock", False),
			("src/{a,b}/*.py", "src/b/x.py", True),
			("README.md", "docs/README.md", False),
			("**/*.log", "debug.log", True),
			("**/*.log", "logs/app.log", True),
			("**/secrets.env", "secrets.env", True),
			("**/secrets.env", "config/prod/secrets.env", True),
			("**/secrets.env", "my-secrets.env", False),
			("src/**/test_*.py", "src/test_a.py", True),
			("src/**/test_*.py", "src/x/y/test_a.py", True),
			("src/**/test_*.py", "srctest_a.py", False),
			("[^abc].txt", "b.txt", False),
		],
	)
	def test_glob_semantics(self, pattern: str, path: str, expected: bool) -> None:
		"""Test that patterns match whole paths with '*' crossing directories."""
		assert bool(compile_pattern(pattern).match(path)) is expected

	@pytest.mark.parametrize(
		("pattern", "reason"),
		[
			("foo[", "unclosed character class"),
			("{a,b", "unclosed '{'"),
			("a}", "unmatched '}'"),
			("{a,{b,c}}", "nested alternation is not supported"),
		],
	)
	def test_malformed_patterns(self, pattern: str, reason: str) -> None:
		"""Test that malformed patterns raise IgnoreFileError."""
		with pytest.raises(IgnoreFileError) as exc_info:
			compile_pattern(pattern)
		assert exc_info.value.reason == reason
		assert exc_info.value.pattern == pattern


@pytest.mark.unit
class TestIgnoreMatcher:
	"""Test cases for IgnoreMatcher."""

	def test_empty_matcher_matches_nothing(self) -> None:
		"""Test that a matcher without patterns never matches."""
		matcher = IgnoreMatcher()
		assert not matcher.matches("anything.txt")
		assert len(matcher) == 0

	def test_skips_blank_lines_and_comments(self) -> None:
		"""Test that blank lines and comments are not patterns."""
		matcher = IgnoreMatcher.compile(["", "# lock files", "   ", "*.lock"])
		assert matcher.patterns == ("*.lock",)
		assert matcher.matches("poetry.lock")

	def test_negation_lines_have_no_effect(self, caplog: pytest.LogCaptureFixture) -> None:
		"""Test that '!' lines are skipped with a warning."""
		with caplog.at_level(logging.WARNING):
			matcher = IgnoreMatcher.compile(["*.log", "!keep.log"])

		assert matcher.patterns == ("*.log",)
		assert matcher.matches("keep.log")
		assert "Negation patterns are not supported" in caplog.text

	def test_bad_line_does_not_block_the_rest(self, caplog: pytest.LogCaptureFixture) -> None:
		"""Test that a malformed line is skipped and recorded."""
		with caplog.at_level(logging.WARNING):
			matcher = IgnoreMatcher.compile(["*.log", "foo[", "*.min.js"])

		assert matcher.patterns == ("*.log", "*.min.js")
		assert matcher.matches("dist/app.min.js")
		assert len(matcher.errors) == 1
		assert matcher.errors[0].line_number == 2
		assert matcher.errors[0].pattern == "foo["
		assert "line 2" in caplog.text

	def test_matches_accepts_path_objects(self) -> None:
		"""Test that Path arguments are matched like strings."""
		matcher = IgnoreMatcher.compile(["vendor/*"])
		assert matcher.matches(Path("vendor") / "lib" / "x.go")

	def test_matcher_is_immutable(self) -> None:
		"""Test that the pattern set cannot be changed after construction."""
		matcher = IgnoreMatcher.compile(["*.log"])
		with pytest.raises(AttributeError):
			matcher.patterns = ("*",)  # type: ignore[misc]


@pytest.mark.unit
@pytest.mark.fs
class TestIgnoreFile:
	"""Test cases for loading the ignore file."""

	def test_missing_file_yields_empty_matcher(self, tmp_path: Path) -> None:
		"""Test that an absent ignore file matches nothing."""
		matcher = IgnoreMatcher.from_file(tmp_path)
		assert len(matcher) == 0
		assert not matcher.matches("debug.log")

	def test_loads_patterns_from_repo_root(self, tmp_path: Path) -> None:
		"""Test that patterns are read from the fixed file name."""
		(tmp_path / IGNORE_FILE_NAME).write_text("# generated\n*.log\npackage-lock.json\n", encoding="utf-8")

		matcher = IgnoreMatcher.from_file(tmp_path)

		assert matcher.patterns == ("*.log", "package-lock.json")
		assert matcher.matches("package-lock.json")
		assert not matcher.matches("src/main.py")

	def test_custom_file_name(self, tmp_path: Path) -> None:
		"""Test loading an ignore file with a configured name."""
		(tmp_path / ".custom-ignore").write_text("*.snap\n", encoding="utf-8")
		matcher = IgnoreMatcher.from_file(tmp_path, ".custom-ignore")
		assert matcher.matches("tests/__snapshots__/a.snap")

	def test_unreadable_file_yields_empty_matcher(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
		"""Test that a file that cannot be decoded is reported and ignored."""
		(tmp_path / IGNORE_FILE_NAME).write_bytes(b"\xff\xfe*.log\x80")

		with caplog.at_level(logging.WARNING):
			matcher = IgnoreMatcher.from_file(tmp_path)

		assert len(matcher) == 0
		assert "Could not read ignore file" in caplog.text
