"""
Configuration handling for commit_split.

Provides access to the model configuration file stored in the user's
home directory. See :mod:`commit_split.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
