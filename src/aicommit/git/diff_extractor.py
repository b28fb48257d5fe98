"""Staged diff extraction with ignore filtering."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from aicommit.git.ignore import IGNORE_FILE_NAME, IgnoreMatcher

if TYPE_CHECKING:
	from collections.abc import Iterable
	from pathlib import Path

	from pygit2 import Diff, Patch

logger = logging.getLogger(__name__)

# Line origins that carry a visible marker in the output
MARKED_ORIGINS = ("+", "-", " ")

DIFF_HEADER_PREFIX = "diff --git "


class StagedChanges(Protocol):
	"""The part of the VCS collaborator the extractor relies on."""

	@property
	def repo_root(self) -> Path: ...

	def staged_diff(self, context_lines: int = 3) -> Diff | str: ...


def _patch_path(patch: Patch) -> str | None:
	"""Path a patch belongs to, preferring the new file path."""
	delta = patch.delta
	return delta.new_file.path or delta.old_file.path


def _file_header(patch: Patch) -> list[str]:
	"""The ``diff --git``/``---``/``+++`` lines that precede the first hunk."""
	header: list[str] = []
	for line in (patch.text or "").splitlines(keepends=True):
		if line.startswith("@@"):
			break
		header.append(line)
	return header


def render_patches(patches: Iterable[Patch], matcher: IgnoreMatcher) -> str:
	"""
	Render patches as unified diff text, dropping every line of ignored files.

	Each hunk line gets its origin marker (``+``, ``-`` or a space) exactly
	once; other origins (e.g. "no newline at end of file") are emitted as is.

	Args:
	    patches: Patches of a pygit2 diff
	    matcher: Paths to drop

	Returns:
	    The filtered diff text

	"""
	parts: list[str] = []
	skipped = 0
	for patch in patches:
		if patch is None:
			continue
		path = _patch_path(patch)
		if path is not None and matcher.matches(path):
			skipped += 1
			continue

		parts.extend(_file_header(patch))
		for hunk in patch.hunks:
			hunk_header = hunk.header
			parts.append(hunk_header if hunk_header.endswith("\n") else f"{hunk_header}\n")
			for line in hunk.lines:
				marker = line.origin if line.origin in MARKED_ORIGINS else ""
				parts.append(f"{marker}{line.content}")

	if skipped:
		logger.debug("Dropped %d ignored file(s) from the staged diff", skipped)
	return "".join(parts)


def _header_path(header_line: str) -> str | None:
	"""Extract the new-side path from a ``diff --git a/x b/y`` line."""
	rest = header_line.rstrip("\n")[len(DIFF_HEADER_PREFIX) :]
	_, sep, new_path = rest.rpartition(" b/")
	return new_path if sep else None


def filter_diff_text(diff_text: str, matcher: IgnoreMatcher) -> str:
	"""
	Drop the sections of already rendered diff text that belong to ignored files.

	Lines before the first ``diff --git`` header have no file and are kept.

	Args:
	    diff_text: Unified diff text
	    matcher: Paths to drop

	Returns:
	    The filtered diff text

	"""
	kept: list[str] = []
	dropping = False
	for line in diff_text.splitlines(keepends=True):
		if line.startswith(DIFF_HEADER_PREFIX):
			path = _header_path(line)
			dropping = path is not None and matcher.matches(path)
		if not dropping:
			kept.append(line)
	return "".join(kept)


class DiffExtractor:
	"""Produces the staged diff text with ignored files removed."""

	def __init__(self, vcs: StagedChanges, ignore_file: str = IGNORE_FILE_NAME) -> None:
		"""
		Initialize the extractor.

		Args:
		    vcs: Repository collaborator providing the staged diff
		    ignore_file: Name of the ignore file at the repository root

		"""
		self.vcs = vcs
		self.ignore_file = ignore_file

	def extract(self, context_lines: int = 3) -> str:
		"""
		Get the staged diff as text.

		The ignore file is re-read on every call.

		Args:
		    context_lines: Number of unchanged lines around each change

		Returns:
		    The filtered diff, or an empty string when nothing is staged

		Raises:
		    ValueError: If ``context_lines`` is negative
		    GitError: If the diff cannot be computed

		"""
		if context_lines < 0:
			msg = "context_lines must be >= 0"
			raise ValueError(msg)

		matcher = IgnoreMatcher.from_file(self.vcs.repo_root, self.ignore_file)
		diff = self.vcs.staged_diff(context_lines)
		# Collaborators may hand over pre-rendered text instead of a pygit2 diff
		text = filter_diff_text(diff, matcher) if isinstance(diff, str) else render_patches(diff, matcher)
		logger.debug("Staged diff is %d characters after filtering", len(text))
		return text
