"""Utility modules for ai-commit."""
