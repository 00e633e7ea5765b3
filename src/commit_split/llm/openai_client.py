"""
Client for OpenAI-compatible chat completion servers.

This client wraps HTTP requests to the ``/chat/completions`` endpoint
offered by OpenAI and by most self-hosted model servers. On error
conditions (HTTP errors, timeouts, unexpected payloads), a
:class:`LLMError` is raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class LLMError(Exception):
    """Raised when communication with the LLM server fails."""

    pass


@dataclass
class OpenAIClient:
    """Client for an OpenAI-compatible chat completion API.

    Parameters
    ----------
    base_url : str
        Base URL of the API, e.g. ``"https://api.openai.com/v1"``.
    api_key : str
        Bearer token sent in the ``Authorization`` header.
    model : str
        Name of the model to use, e.g. ``"gpt-4o-mini"``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 60 seconds.
    """

    base_url: str
    api_key: str
    model: str
    request_timeout: float = 60.0

    def _endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def chat(self, messages: List[Dict[str, str]]) -> str:
        """Send ``messages`` and return the content of the first choice.

        Raises
        ------
        LLMError
            If the request fails, the server returns an error, or the
            response carries no message content.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        url = self._endpoint()
        headers = {"Authorization": f"Bearer {self.api_key}"}
        logger.debug("Sending request to LLM at %s with %d message(s)", url, len(messages))
        try:
            response = requests.post(
                url,
                json=payload,
                headers=headers,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to LLM: %s", exc)
            raise LLMError(str(exc)) from exc
        if response.status_code != 200:
            logger.error(
                "LLM returned non-200 status %s: %s", response.status_code, response.text
            )
            raise LLMError(f"LLM returned status {response.status_code}: {response.text}")
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse LLM response: %s", exc)
            raise LLMError("Failed to parse LLM response") from exc

        choices = data.get("choices") if isinstance(data, dict) else None
        if choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str) and content.strip():
                return content.strip()
        logger.error("The content returned by AI is empty or invalid: %s", data)
        raise LLMError("The content returned by AI is empty or invalid")
