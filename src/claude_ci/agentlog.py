#!/usr/bin/env python3
"""Agent message serialization and log sanitization."""

import dataclasses
import json
import logging
import re

from claude_agent_sdk import (
    AssistantMessage,
    ResultMessage,
    StreamEvent,
    SystemMessage,
    UserMessage,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses (task and hook messages) match their base.
MESSAGE_TYPES = (
    (ResultMessage, "result"),
    (SystemMessage, "system"),
    (AssistantMessage, "assistant"),
    (UserMessage, "user"),
    (StreamEvent, "stream_event"),
)


def message_type(message) -> str:
    """Return the wire type tag for an SDK message.

    Message classes outside MESSAGE_TYPES are tagged with their snake_cased
    class name, e.g. RateLimitEvent -> rate_limit_event.
    """
    if isinstance(message, dict):
        return message.get("type", "unknown")
    for cls, tag in MESSAGE_TYPES:
        if isinstance(message, cls):
            return tag
    name = type(message).__name__
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def message_to_dict(message) -> dict:
    """Convert an SDK message into a JSON-ready dict tagged with its type."""
    if isinstance(message, dict):
        return message
    if dataclasses.is_dataclass(message):
        return {"type": message_type(message), **dataclasses.asdict(message)}
    return {"type": message_type(message), "repr": repr(message)}


def dump_json(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def sanitize_message(message, show_full_output: bool) -> str | None:
    """Return the loggable form of a message, or None to suppress it.

    Full output dumps the whole message and is meant for debug runs only,
    since tool results can carry secrets. Otherwise only the init summary and
    the result summary are shown.
    """
    if show_full_output:
        return dump_json(message_to_dict(message))

    if isinstance(message, SystemMessage) and message.subtype == "init":
        data = message.data or {}
        return dump_json({
            "type": "system",
            "subtype": "init",
            "message": "Claude Code initialized",
            "model": data.get("model", "unknown"),
        })

    if isinstance(message, ResultMessage):
        return dump_json({
            "type": "result",
            "subtype": message.subtype,
            "is_error": message.is_error,
            "duration_ms": message.duration_ms,
            "num_turns": message.num_turns,
            "total_cost_usd": message.total_cost_usd,
            "permission_denials": getattr(message, "permission_denials", None),
        })

    return None


def log_message(message, show_full_output: bool) -> None:
    """Log the sanitized form of a message, if any."""
    sanitized = sanitize_message(message, show_full_output)
    if sanitized:
        logger.info("%s", sanitized)
