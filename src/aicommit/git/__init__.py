"""Git operations for ai-commit."""

from .diff_extractor import DiffExtractor, filter_diff_text, render_patches
from .ignore import IGNORE_FILE_NAME, IgnoreFileError, IgnoreMatcher
from .utils import GitError, GitRepoContext, NoRepositoryError, StaleParentError

__all__ = [
	"IGNORE_FILE_NAME",
	"DiffExtractor",
	"GitError",
	"GitRepoContext",
	"IgnoreFileError",
	"IgnoreMatcher",
	"NoRepositoryError",
	"StaleParentError",
	"filter_diff_text",
	"render_patches",
]
