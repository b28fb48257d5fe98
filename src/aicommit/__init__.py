"""ai-commit - AI generated commit messages for staged changes."""

__version__ = "0.4.0"
