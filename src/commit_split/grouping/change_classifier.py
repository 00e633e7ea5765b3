"""
Classification of Git status tokens into change kinds.

A status token is the one or two letter code at the start of each line
of ``git status --porcelain``. Each letter is mapped independently and
the results are OR-ed together, so ``"AM"`` yields
``ChangeKind.ADDED | ChangeKind.MODIFIED``.
"""

from __future__ import annotations

import enum
from typing import Dict


class ChangeKind(enum.IntFlag):
    """Bitset of the kinds of change a single path can carry."""

    MODIFIED = 1
    ADDED = 2
    RENAMED = 4
    DELETED = 8


_STATUS_LETTERS: Dict[str, ChangeKind] = {
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.ADDED,
    "R": ChangeKind.RENAMED,
    "D": ChangeKind.DELETED,
}


def classify_status(token: str) -> ChangeKind:
    """Map a status token to its :class:`ChangeKind` bitset.

    Parameters
    ----------
    token : str
        One or two status letters, e.g. ``"M"`` or ``"RM"``.

    Returns
    -------
    ChangeKind
        The combined kind. Letters outside ``M``, ``A``, ``R`` and ``D``
        contribute nothing, so a token made only of unknown letters
        yields ``ChangeKind(0)``. Callers must not accept such a value
        as a valid change.
    """
    kind = ChangeKind(0)
    for letter in token:
        kind |= _STATUS_LETTERS.get(letter, ChangeKind(0))
    return kind


def describe_kind(kind: ChangeKind) -> str:
    """Return the comma-joined names of the kinds set in ``kind``.

    >>> describe_kind(ChangeKind.ADDED | ChangeKind.MODIFIED)
    'MODIFIED, ADDED'
    """
    return ", ".join(member.name for member in ChangeKind if kind & member)
