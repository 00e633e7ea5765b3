"""
Top-level package for commit_split.

This package exposes the main CLI entry point via the
``commit_split.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.0.0a2"
