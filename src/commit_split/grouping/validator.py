"""
Validation of a grouping proposal against the real change list.

The language model is asked to place every changed file in exactly one
commit group. Nothing guarantees that it does, so the proposal is
compared with the change records produced by the status parser. Paths
are compared as literal strings.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Iterable, List, Sequence

from commit_split.grouping.group_model import CommitGroup, ValidationResult

if TYPE_CHECKING:
    from commit_split.vcs.status_parser import ChangeRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def validate_groups(
    records: Iterable[ChangeRecord],
    groups: Sequence[CommitGroup],
) -> ValidationResult:
    """Compare ``groups`` with the authoritative ``records``.

    Parameters
    ----------
    records : Iterable[ChangeRecord]
        Change records of the working tree.
    groups : Sequence[CommitGroup]
        Groups proposed by the language model.

    Returns
    -------
    ValidationResult
        Duplicate, missing and invalid paths. ``valid`` is True only
        when all three sets are empty. A malformed proposal is reported
        here rather than raised.
    """
    known_paths = {record.path for record in records}
    proposed: List[str] = [path for group in groups for path in group.changes]
    counts = Counter(proposed)

    result = ValidationResult(
        duplicate_files={path for path, count in counts.items() if count > 1},
        missing_files=known_paths.difference(counts),
        invalid_files={path for path in counts if path not in known_paths},
    )
    result.valid = not (result.duplicate_files or result.missing_files or result.invalid_files)
    if not result.valid:
        logger.debug(
            "Proposal failed validation: duplicates=%s missing=%s invalid=%s",
            sorted(result.duplicate_files),
            sorted(result.missing_files),
            sorted(result.invalid_files),
        )
    return result
