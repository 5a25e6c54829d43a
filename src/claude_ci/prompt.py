#!/usr/bin/env python3
"""Build the prompt sent to the agent.

A plain prompt file becomes a string prompt. When claude-user-request.txt
sits next to it, the prompt becomes one streaming user message with two text
blocks: instructions first, then the user's request. The CLI only looks for
slash commands in the last block, so the order matters.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

from claude_ci.request import USER_REQUEST_FILENAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextPrompt:
    text: str

    def to_sdk(self) -> str:
        return self.text


@dataclass(frozen=True)
class MultiBlockPrompt:
    instructions: str
    request: str

    def user_message(self) -> dict:
        """Return the streaming-mode user message for this prompt."""
        return {
            "type": "user",
            "session_id": "",
            "message": {
                "role": "user",
                "content": [
                    {"type": "text", "text": self.instructions},
                    {"type": "text", "text": self.request},
                ],
            },
            "parent_tool_use_id": None,
        }

    def to_sdk(self) -> AsyncIterator[dict]:
        async def _messages():
            yield self.user_message()
        return _messages()


Prompt = TextPrompt | MultiBlockPrompt


def create_prompt_config(prompt_path: str) -> Prompt:
    """Read prompt_path and the optional sibling user request file."""
    prompt_content = Path(prompt_path).read_text(encoding="utf-8")

    request_path = Path(prompt_path).parent / USER_REQUEST_FILENAME
    if not request_path.exists():
        return TextPrompt(prompt_content)

    user_request = request_path.read_text(encoding="utf-8")
    logger.info("Using multi-block message with user request: %s", user_request)
    return MultiBlockPrompt(instructions=prompt_content, request=user_request)
