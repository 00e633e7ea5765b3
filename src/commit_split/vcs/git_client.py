"""
Git client implementation for commit_split.

This module wraps the Git operations required by the commit splitter:
reading the status snapshot and per-file diffs, reading recent commit
titles for context, and committing a list of paths with a title. All
subprocess calls go through :meth:`GitClient._run` so that unit tests
can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from commit_split.vcs.status_parser import ChangeRecord, parse_status_output


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_available() -> bool:
        """Return True if the ``git`` executable can be run."""
        try:
            result = subprocess.run(
                ["git", "--version"],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as exc:
            logger.error("Exception occurred while checking Git availability: %s", exc)
            return False
        if result.returncode != 0:
            logger.error("Error while checking Git availability: %s", result.stderr.strip())
            return False
        return bool(result.stdout.strip())

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Failed to execute Git: %s", exc)
            raise GitError(f"Failed to execute Git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    def get_status_output(self) -> str:
        """Return ``git status --porcelain`` trimmed of surrounding whitespace.

        An empty string means the working tree has no changes.
        """
        result = self._run(["status", "--porcelain"], check=True)
        return result.stdout.strip()

    def get_file_diff(self, file_path: str) -> Optional[str]:
        """Return the diff of a single file, or None if it cannot be read.

        Warnings Git prints on stderr (line ending conversions and the
        like) are appended to the diff so the model sees them too.
        """
        try:
            result = self._run(["diff", "--", file_path], check=True)
        except GitError as exc:
            logger.error("Error while getting the diff for file %s: %s", file_path, exc)
            return None
        diff = result.stdout
        if result.stderr:
            diff += f"\n[Git Warning/Error]:\n{result.stderr}"
        return diff

    def get_changes(self, max_workers: Optional[int] = None) -> List[ChangeRecord]:
        """Get the list of changed files with their diffs.

        Raises
        ------
        GitError
            If the git status command fails.
        UnmergedFileError
            If the working tree contains conflicted files.
        """
        status_output = self.get_status_output()
        return parse_status_output(status_output, self.get_file_diff, max_workers=max_workers)

    def get_recent_commit_titles(self, count: int = 10) -> str:
        """Return the titles of the last ``count`` commits, newline separated.

        An empty string is returned when the history cannot be read, for
        example in a repository without any commit yet.
        """
        try:
            result = self._run(["log", "--pretty=format:%s", "-n", str(count)], check=True)
        except GitError as exc:
            logger.warning("Could not read recent commit titles: %s", exc)
            return ""
        if result.stderr:
            logger.warning("Git command warning/error: %s", result.stderr.strip())
        titles = [title for title in result.stdout.strip().split("\n") if title]
        return "\n".join(titles)

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------
    def commit_files(self, title: str, files: List[str]) -> None:
        """Commit exactly ``files`` with ``title`` as the message.

        An empty file list is a no-op. If the commit fails, a GitError
        is raised; commits made earlier in the same run are kept.
        """
        if not files:
            logger.debug("No files for commit '%s'; skipping", title)
            return
        self._run(["commit", "-m", title, "--"] + list(files), check=True)
