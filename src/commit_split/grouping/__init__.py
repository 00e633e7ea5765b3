"""
Classification, validation and repair of commit groupings.

See :mod:`commit_split.grouping.change_classifier`,
:mod:`commit_split.grouping.validator` and
:mod:`commit_split.grouping.repair` for details.
"""

from .change_classifier import ChangeKind, classify_status, describe_kind  # noqa: F401
from .group_model import CommitGroup, ValidationResult  # noqa: F401
from .repair import repair_groups  # noqa: F401
from .validator import validate_groups  # noqa: F401
