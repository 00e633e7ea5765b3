"""
Commit grouping using an LLM.

This module provides the :class:`CommitGrouper` class, which sends the
working tree's change records and the repository's recent commit titles
to a chat model (via :class:`OpenAIClient`) and turns the JSON answer
into :class:`CommitGroup` objects.

The model must answer with exactly::

  {"commits": [{"title": "...", "changes": ["path", ...]}, ...]}

Anything else is a :class:`ProposalFormatError`. There is no retry; the
caller is expected to stop.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Sequence

from commit_split.grouping.change_classifier import describe_kind
from commit_split.grouping.group_model import CommitGroup
from commit_split.llm.openai_client import OpenAIClient
from commit_split.vcs.status_parser import ChangeRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


SYSTEM_PROMPT = (
    "You are a code versioning assistant focused on processing Git diff information. "
    "Your task is to group code diffs and generate a Git commit title for each group. "
    "Please note: "
    "1. All files in the input need to be included in the commit grouping; please do "
    "not duplicate, overflow, or omit any files. "
    "2. File paths must remain the same, do not modify or simplify them. "
    "3. If possible, please merge changes from multiple files to reduce the number of "
    "commits. "
    "Titles should follow the style of the last few git titles. The output JSON must "
    "strictly adhere to the following format; field names and types must be identical, "
    "no more or less:\n"
    "{\n"
    '  "commits": [\n'
    "    {\n"
    '      "title": "...",\n'
    '      "changes": ["src/file1.py"]\n'
    "    },\n"
    "    {\n"
    '      "title": "...",\n'
    '      "changes": ["src/file2.py", "src/file3.py"]\n'
    "    }\n"
    "  ]\n"
    "}\n"
    "Please ensure that the JSON formatting is correct and that the output does not "
    "contain any additional text, code or interpretation."
)

_CODE_FENCE_RE = re.compile(r"```json|```")


class ProposalFormatError(Exception):
    """Raised when the model's answer is not a valid grouping proposal."""

    pass


def format_file_changes(records: Sequence[ChangeRecord]) -> str:
    """Serialize change records as the JSON list shown to the model."""
    formatted: List[Dict[str, str]] = []
    for record in records:
        item = {"path": record.path, "state": describe_kind(record.kind)}
        if record.diff:
            item["diff"] = record.diff
        formatted.append(item)
    return json.dumps(formatted, indent=2, ensure_ascii=False)


def _is_valid_commit(commit: Any) -> bool:
    return (
        isinstance(commit, dict)
        and isinstance(commit.get("title"), str)
        and isinstance(commit.get("changes"), list)
        and all(isinstance(path, str) for path in commit["changes"])
    )


class CommitGrouper:
    """Ask a chat model to split change records into titled commits."""

    def __init__(self, client: OpenAIClient) -> None:
        self.client = client

    def build_messages(self, records: Sequence[ChangeRecord], history: str) -> List[Dict[str, str]]:
        """Construct the chat messages for a grouping request."""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "system",
                "content": f"Here are a few past git titles for reference:\n{history}",
            },
            {
                "role": "user",
                "content": (
                    "Below are the changes to the code, please use these to generate the "
                    f"appropriate commit grouping and title:\n{format_file_changes(records)}"
                ),
            },
        ]

    def parse_response(self, raw_response: str) -> List[CommitGroup]:
        """Turn the model's answer into commit groups.

        Markdown code fences around the JSON are tolerated.

        Raises
        ------
        ProposalFormatError
            If the answer is not JSON or does not have the expected shape.
        """
        clean = _CODE_FENCE_RE.sub("", raw_response or "").strip()
        try:
            data = json.loads(clean)
        except json.JSONDecodeError as exc:
            logger.error("The content returned by AI cannot be parsed as JSON: %s", clean)
            raise ProposalFormatError(f"The content returned by AI cannot be parsed as JSON: {exc}") from exc

        commits = data.get("commits") if isinstance(data, dict) else None
        if not isinstance(commits, list) or not all(_is_valid_commit(commit) for commit in commits):
            logger.error("The parsed result does not match the expected format: %s", data)
            raise ProposalFormatError("The parsed result does not match the expected format")

        return [CommitGroup(title=commit["title"], changes=list(commit["changes"])) for commit in commits]

    def generate_groups(self, records: Sequence[ChangeRecord], history: str = "") -> List[CommitGroup]:
        """Request a grouping proposal for ``records``.

        Raises
        ------
        LLMError
            If the model cannot be reached.
        ProposalFormatError
            If the answer is malformed.
        """
        messages = self.build_messages(records, history)
        raw_response = self.client.chat(messages)
        return self.parse_response(raw_response)
