"""Helpers for building throwaway git repositories in tests."""

from __future__ import annotations

from pathlib import Path

import pygit2


def stage_file(repo: pygit2.Repository, name: str, content: str) -> None:
	"""Write a file into the work tree and add it to the index."""
	path = Path(repo.workdir) / name
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(content, encoding="utf-8")
	repo.index.add(name)
	repo.index.write()


def make_commit(repo: pygit2.Repository, message: str) -> pygit2.Oid:
	"""Commit the current index directly through pygit2."""
	tree_id = repo.index.write_tree()
	signature = repo.default_signature
	parents = [] if repo.head_is_unborn else [repo.head.target]
	return repo.create_commit("HEAD", signature, signature, message, tree_id, parents)
