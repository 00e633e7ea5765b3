"""
Parsing of ``git status --porcelain`` output into change records.

Each status line is turned into a :class:`ChangeRecord`. Untracked and
unparseable lines are skipped and logged; an unmerged path stops the
parse with :class:`UnmergedFileError` because committing it would
record unresolved conflict markers. Diffs are fetched for every path
that still exists in the working tree.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from commit_split.grouping.change_classifier import ChangeKind, classify_status


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


STATUS_LINE_RE = re.compile(r"^\s*([MARDU]{1,2}|\?\?)\s{1,2}(.+)$")
UNTRACKED = "??"
UNMERGED = "U"
RENAME_ARROW = "->"

DiffFetcher = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ChangeRecord:
    """A single changed path in the working tree.

    ``path`` is the current path; for renames this is the destination.
    ``diff`` is None for deleted files and whenever no diff content
    could be obtained.
    """

    path: str
    kind: ChangeKind
    diff: Optional[str] = None


class UnmergedFileError(Exception):
    """Raised when the status report contains an unmerged (conflicted) path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Unmerged file: {path}. Please resolve the conflict before running the program.")
        self.path = path


def _unquote(path: str) -> str:
    """Undo the C-style quoting Git applies to paths with spaces or non-ASCII bytes.

    Octal escapes are decoded as UTF-8 bytes. Unquoted paths are returned
    unchanged.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    inner = path[1:-1]
    return inner.encode("utf-8").decode("unicode_escape").encode("latin-1").decode("utf-8", errors="replace")


def _current_path(file_field: str) -> str:
    """Return the destination of ``old -> new`` or the trimmed field itself."""
    if RENAME_ARROW in file_field:
        _, new_path = file_field.split(RENAME_ARROW, 1)
        return _unquote(new_path.strip())
    return _unquote(file_field.strip())


def _parse_lines(status_output: str) -> List[Tuple[str, ChangeKind]]:
    entries: List[Tuple[str, ChangeKind]] = []
    for line in status_output.splitlines():
        if not line.strip():
            continue

        match = STATUS_LINE_RE.match(line)
        if match is None:
            logger.error("Unable to parse Git status line: %s", line)
            continue

        token, file_field = match.groups()
        if token == UNTRACKED:
            logger.warning("Untracked file: %s (skipping)", file_field)
            continue
        if UNMERGED in token:
            logger.warning("Unmerged file: %s", file_field)
            raise UnmergedFileError(file_field.strip())

        path = _current_path(file_field)
        kind = classify_status(token)
        if not path or not kind:
            logger.error("Unable to parse Git status line: %s", line)
            continue
        entries.append((path, kind))
    return entries


def parse_status_output(
    status_output: str,
    diff_fetcher: DiffFetcher,
    max_workers: Optional[int] = None,
) -> List[ChangeRecord]:
    """Parse a porcelain status report into change records.

    Parameters
    ----------
    status_output : str
        Raw output of ``git status --porcelain``. Empty or blank output
        means there is nothing to commit.
    diff_fetcher : Callable[[str], Optional[str]]
        Returns the diff of a path, or None/empty when there is none.
        It is never called for deleted files, nor for the source path
        of a rename.
    max_workers : int, optional
        Size of the thread pool used for diff lookups. Lookups are
        independent of each other; the result keeps input line order.

    Returns
    -------
    List[ChangeRecord]
        One record per accepted status line, in input order.

    Raises
    ------
    UnmergedFileError
        If any line carries the unmerged status. No diffs are fetched
        in that case.
    """
    entries = _parse_lines(status_output)
    if not entries:
        return []

    def fetch(entry: Tuple[str, ChangeKind]) -> Optional[str]:
        path, kind = entry
        if kind == ChangeKind.DELETED:
            return None
        try:
            return diff_fetcher(path)
        except Exception as exc:
            logger.error("Error while getting the diff for file %s: %s", path, exc)
            return None

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        diffs = list(executor.map(fetch, entries))

    return [
        ChangeRecord(path=path, kind=kind, diff=diff or None)
        for (path, kind), diff in zip(entries, diffs)
    ]
