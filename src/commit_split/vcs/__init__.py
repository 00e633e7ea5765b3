"""
Version control system (VCS) integration.

This package contains the Git client used to read the working tree's
change set and to commit grouped changes, together with the parser for
Git's porcelain status report.
"""

from .git_client import GitClient, GitError  # noqa: F401
from .status_parser import ChangeRecord, UnmergedFileError, parse_status_output  # noqa: F401
