"""
Language model integration for commit_split.

This package contains the :class:`OpenAIClient` for talking to an
OpenAI-compatible chat completion server and the
:class:`CommitGrouper` which asks the model to split the change set
into titled commits.
"""

from .openai_client import OpenAIClient, LLMError  # noqa: F401
from .commit_grouper import CommitGrouper, ProposalFormatError  # noqa: F401
