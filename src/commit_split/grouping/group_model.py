"""
Data models for commit grouping.

The :class:`CommitGroup` is one titled commit proposed by the language
model. :class:`ValidationResult` describes how a list of groups differs
from the authoritative set of changed paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set


@dataclass
class CommitGroup:
    """Representation of a proposed commit.

    Attributes
    ----------
    title : str
        Commit title suggested by the model.
    changes : List[str]
        Paths to commit together, in the order the model listed them.
    """

    title: str
    changes: List[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Outcome of checking a proposal against the real change list."""

    valid: bool = True
    duplicate_files: Set[str] = field(default_factory=set)
    missing_files: Set[str] = field(default_factory=set)
    invalid_files: Set[str] = field(default_factory=set)
