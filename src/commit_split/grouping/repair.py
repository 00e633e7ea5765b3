"""
Best-effort repair of an invalid grouping proposal.

Duplicated paths are kept only in the latest declared group that lists
them, and paths unknown to the working tree are dropped everywhere.
Files the model forgot to mention are left out; the user decides what
to do about them.
"""

from __future__ import annotations

import logging
from typing import List, Set

from commit_split.grouping.group_model import CommitGroup, ValidationResult


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def repair_groups(groups: List[CommitGroup], result: ValidationResult) -> List[CommitGroup]:
    """Strip duplicate and invalid entries from ``groups`` in place.

    Parameters
    ----------
    groups : List[CommitGroup]
        The proposal, in declaration order.
    result : ValidationResult
        Validation of ``groups`` as returned by
        :func:`~commit_split.grouping.validator.validate_groups`.

    Returns
    -------
    List[CommitGroup]
        The same list object, with each group's ``changes`` filtered.
    """
    if result.valid:
        return groups

    if result.duplicate_files:
        placed: Set[str] = set()
        for group in reversed(groups):
            kept = []
            for path in group.changes:
                if path in result.duplicate_files:
                    if path in placed:
                        logger.debug("Dropping duplicate '%s' from group '%s'", path, group.title)
                        continue
                    placed.add(path)
                kept.append(path)
            group.changes = kept

    if result.invalid_files:
        for group in groups:
            group.changes = [path for path in group.changes if path not in result.invalid_files]

    return groups
