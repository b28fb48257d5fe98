"""Ignore patterns for excluding files from the diff sent to the LLM."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from collections.abc import Iterable

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".ai-commit-ignore"

# Any run of whole directories, including none
_ANY_DIRECTORIES = "(?:.*/)?"


class IgnoreFileError(Exception):
	"""Raised when an ignore pattern cannot be compiled."""

	def __init__(self, pattern: str, reason: str, line_number: int | None = None) -> None:
		"""
		Initialize the error.

		Args:
		    pattern: The offending glob pattern
		    reason: Why the pattern was rejected
		    line_number: 1-based line in the ignore file, if known

		"""
		self.pattern = pattern
		self.reason = reason
		self.line_number = line_number
		location = f"line {line_number}: " if line_number is not None else ""
		super().__init__(f"{location}invalid pattern '{pattern}': {reason}")


def _check_character_classes(pattern: str) -> None:
	"""Reject patterns with an unterminated ``[...]`` class."""
	i = 0
	while i < len(pattern):
		if pattern[i] != "[":
			i += 1
			continue
		j = i + 1
		if j < len(pattern) and pattern[j] in "!^":
			j += 1
		# A leading ']' is a literal member of the class
		if j < len(pattern) and pattern[j] == "]":
			j += 1
		close = pattern.find("]", j)
		if close == -1:
			raise IgnoreFileError(pattern, "unclosed character class")
		i = close + 1


def _expand_braces(pattern: str, original: str) -> list[str]:
	"""
	Expand ``{a,b}`` alternation into plain glob alternatives.

	Args:
	    pattern: The (possibly partial) pattern to expand
	    original: Full pattern, used for error messages

	Returns:
	    List of brace-free patterns

	Raises:
	    IgnoreFileError: On unbalanced or nested braces

	"""
	start = pattern.find("{")
	first_close = pattern.find("}")
	if start == -1:
		if first_close != -1:
			raise IgnoreFileError(original, "unmatched '}'")
		return [pattern]
	if first_close != -1 and first_close < start:
		raise IgnoreFileError(original, "unmatched '}'")

	end = pattern.find("}", start)
	if end == -1:
		raise IgnoreFileError(original, "unclosed '{'")
	inner = pattern[start + 1 : end]
	if "{" in inner:
		raise IgnoreFileError(original, "nested alternation is not supported")

	prefix = pattern[:start]
	tails = _expand_braces(pattern[end + 1 :], original)
	return [prefix + option + tail for option in inner.split(",") for tail in tails]


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
	"""Translate the ``[...]`` class opening at ``start``; returns the regex and the index after it."""
	j = start + 1
	negated = j < len(pattern) and pattern[j] in "!^"
	if negated:
		j += 1
	members_start = j
	if j < len(pattern) and pattern[j] == "]":
		j += 1
	close = pattern.find("]", j)
	members = pattern[members_start:close]
	# Characters that have a meaning inside a regex class are taken literally
	members = re.sub(r"([\\\[&~|^])", r"\\\1", members)
	return f"[{'^' if negated else ''}{members}]", close + 1


def _translate(pattern: str) -> str:
	"""
	Translate a brace-free glob into a regular expression.

	A ``**/`` at the start of the pattern or after a ``/`` matches zero or
	more whole directories, so ``**/*.log`` also matches ``debug.log``.

	"""
	parts: list[str] = []
	i = 0
	while i < len(pattern):
		char = pattern[i]
		if pattern.startswith("**/", i) and (i == 0 or pattern[i - 1] == "/"):
			parts.append(_ANY_DIRECTORIES)
			i += 3
		elif char == "*":
			while i < len(pattern) and pattern[i] == "*":
				i += 1
			parts.append(".*")
		elif char == "?":
			parts.append(".")
			i += 1
		elif char == "[":
			regex, i = _translate_class(pattern, i)
			parts.append(regex)
		else:
			parts.append(re.escape(char))
			i += 1
	return f"(?s:{''.join(parts)})\\Z"


def compile_pattern(pattern: str) -> re.Pattern[str]:
	"""
	Compile a single glob pattern into a regular expression.

	``*`` and ``?`` match any character including ``/`` and the pattern
	must match the whole repository-relative path. A leading or inner
	``**/`` also matches no directory at all.

	Args:
	    pattern: Glob pattern

	Returns:
	    Compiled regular expression

	Raises:
	    IgnoreFileError: If the pattern is malformed

	"""
	alternatives = _expand_braces(pattern, pattern)
	for alternative in alternatives:
		_check_character_classes(alternative)
	regex = "|".join(f"(?:{_translate(alternative)})" for alternative in alternatives)
	try:
		return re.compile(regex)
	except re.error as e:
		raise IgnoreFileError(pattern, str(e)) from e


@dataclass(frozen=True)
class IgnoreMatcher:
	"""An immutable, ordered set of compiled ignore patterns."""

	patterns: tuple[str, ...] = ()
	errors: tuple[IgnoreFileError, ...] = ()
	_compiled: tuple[re.Pattern[str], ...] = field(default=(), repr=False, compare=False)

	@classmethod
	def compile(cls, lines: Iterable[str]) -> IgnoreMatcher:
		"""
		Build a matcher from the lines of an ignore file.

		Blank lines and ``#`` comments are skipped. ``!`` negation lines are
		not supported and are skipped with a warning. A malformed line is
		skipped with a warning and recorded in ``errors``; the rest of the
		lines still load.

		Args:
		    lines: Ignore file lines in order

		Returns:
		    The compiled matcher

		"""
		patterns: list[str] = []
		compiled: list[re.Pattern[str]] = []
		errors: list[IgnoreFileError] = []

		for line_number, raw_line in enumerate(lines, start=1):
			line = raw_line.strip()
			if not line or line.startswith("#"):
				continue
			if line.startswith("!"):
				logger.warning("Negation patterns are not supported, ignoring line %d: %s", line_number, line)
				continue
			try:
				regex = compile_pattern(line)
			except IgnoreFileError as e:
				error = IgnoreFileError(e.pattern, e.reason, line_number)
				logger.warning("Skipping ignore pattern on %s", error)
				errors.append(error)
				continue
			patterns.append(line)
			compiled.append(regex)

		return cls(patterns=tuple(patterns), errors=tuple(errors), _compiled=tuple(compiled))

	@classmethod
	def from_file(cls, repo_root: Path, file_name: str = IGNORE_FILE_NAME) -> IgnoreMatcher:
		"""
		Load the ignore file located at the repository root.

		A missing or unreadable file yields a matcher that matches nothing.

		Args:
		    repo_root: Repository working directory
		    file_name: Name of the ignore file

		Returns:
		    The compiled matcher

		"""
		ignore_path = Path(repo_root) / file_name
		if not ignore_path.exists():
			logger.debug("No ignore file at %s", ignore_path)
			return cls()

		try:
			content = ignore_path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as e:
			logger.warning("Could not read ignore file %s: %s", ignore_path, e)
			return cls()

		matcher = cls.compile(content.splitlines())
		logger.debug("Loaded %d ignore patterns from %s", len(matcher.patterns), ignore_path)
		return matcher

	def matches(self, path: str | Path) -> bool:
		"""Return True if any pattern matches the repository-relative path."""
		path_str = str(path).replace(os.sep, "/")
		return any(regex.match(path_str) for regex in self._compiled)

	def __len__(self) -> int:
		"""Number of active patterns."""
		return len(self.patterns)
