"""Git utilities for ai-commit, built on pygit2."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
from pygit2 import Commit, Repository, discover_repository

if TYPE_CHECKING:
	from pygit2 import Diff, Oid, Tree

logger = logging.getLogger(__name__)

# libgit2 reports a moved branch tip with this text
STALE_PARENT_MESSAGE = "current tip is not the first parent"


class GitError(Exception):
	"""Custom exception for Git-related errors."""


class NoRepositoryError(GitError):
	"""Raised when no repository can be discovered from the working directory."""


class StaleParentError(GitError):
	"""Raised when HEAD moved between reading the diff and committing."""

	def __init__(self, current_parent: Oid | None) -> None:
		"""
		Initialize the error.

		Args:
		    current_parent: The commit HEAD points at now, or None if unborn

		"""
		self.current_parent = current_parent
		super().__init__(f"HEAD has moved to {current_parent or 'an unborn branch'}")


class GitRepoContext:
	"""Staged-diff and commit operations on one repository."""

	def __init__(self, path: Path | None = None) -> None:
		"""
		Discover and open the repository containing ``path``.

		Args:
		    path: Directory to start searching from (defaults to the cwd)

		Raises:
		    NoRepositoryError: If no repository is found

		"""
		git_dir = discover_repository(str(path or Path.cwd()))
		if git_dir is None:
			msg = "Not a git repository (or any of the parent directories)"
			logger.error(msg)
			raise NoRepositoryError(msg)
		self.repo = Repository(git_dir)

	@property
	def repo_root(self) -> Path:
		"""Working directory of the repository."""
		workdir = self.repo.workdir
		return Path(workdir) if workdir else Path.cwd()

	def head_id(self) -> Oid | None:
		"""
		Get the commit HEAD currently points at.

		Returns:
		    The commit id, or None when the branch has no commits yet

		"""
		if self.repo.head_is_unborn:
			return None
		return self.repo.head.target

	def _head_tree(self) -> Tree:
		"""HEAD's tree, or an empty tree when there are no commits yet."""
		if self.repo.head_is_unborn:
			logger.debug("HEAD is unborn, diffing against the empty tree")
			empty_tree_id = self.repo.TreeBuilder().write()
			return self.repo[empty_tree_id]
		return self.repo.head.peel(Commit).tree

	def staged_diff(self, context_lines: int = 3) -> Diff:
		"""
		Diff the last commit's tree (or the empty tree) against the index.

		Args:
		    context_lines: Number of unchanged lines around each change

		Returns:
		    The pygit2 diff object

		Raises:
		    GitError: If the diff cannot be computed

		"""
		try:
			index = self.repo.index
			index.read()
			return index.diff_to_tree(self._head_tree(), context_lines=context_lines)
		except pygit2.GitError as e:
			msg = f"Failed to compute staged diff: {e}"
			logger.exception(msg)
			raise GitError(msg) from e

	def commit(self, message: str, expected_parent: Oid | None = None) -> Oid:
		"""
		Create a commit on HEAD from the staged index.

		Args:
		    message: Commit message
		    expected_parent: The HEAD commit the diff was computed against

		Returns:
		    Id of the new commit

		Raises:
		    StaleParentError: If HEAD no longer points at ``expected_parent``
		    GitError: For every other failure

		"""
		current = self.head_id()
		if current != expected_parent:
			logger.warning("HEAD moved from %s to %s since the diff was computed", expected_parent, current)
			raise StaleParentError(current)

		try:
			index = self.repo.index
			index.read()
			if len(index) == 0:
				msg = "No staged changes to commit"
				raise GitError(msg)
			tree_id = index.write_tree()
			signature = self.repo.default_signature
			parents = [expected_parent] if expected_parent is not None else []
			commit_id = self.repo.create_commit("HEAD", signature, signature, message, tree_id, parents)
		except pygit2.GitError as e:
			if STALE_PARENT_MESSAGE in str(e):
				raise StaleParentError(self.head_id()) from e
			msg = f"Failed to create commit: {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		except KeyError as e:
			# default_signature raises KeyError when user.name/user.email are unset
			msg = "Git user.name and user.email must be configured to commit"
			raise GitError(msg) from e

		logger.info("Created commit %s", commit_id)
		return commit_id
