#!/usr/bin/env python3
"""Extract the user's request from trigger comments and GitHub event payloads.

Given a comment like "@claude /review-pr please check the auth module",
the request is "/review-pr please check the auth module". The extracted text
is written to claude-user-request.txt next to the prompt file so the run step
can send it as the last content block.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

USER_REQUEST_FILENAME = "claude-user-request.txt"
DEFAULT_REQUEST = "Please analyze the context and help with this request."

COMMENT_EVENTS = frozenset({
    "issue_comment", "pull_request_review_comment", "pull_request_review",
})
ISSUE_EVENTS = frozenset({"issues"})
PR_EVENTS = frozenset({"pull_request", "pull_request_target"})


@dataclass
class EventContext:
    event_name: str
    comment_body: str | None = None
    issue_body: str | None = None
    pr_body: str | None = None


def extract_user_request(body: str | None, trigger_phrase: str) -> str | None:
    """Return the text after the first trigger phrase, or None.

    Matching is case-insensitive and the trigger phrase is taken literally.
    The capture runs to the end of the body, across newlines.
    """
    if not body:
        return None

    pattern = re.escape(trigger_phrase) + r"\s*(.*)"
    match = re.search(pattern, body, re.IGNORECASE | re.DOTALL)
    if not match:
        return None
    return match.group(1).strip() or None


def extract_user_request_from_event(context: EventContext, trigger_phrase: str) -> str:
    """Return the user's request for an event, falling back to DEFAULT_REQUEST."""
    if context.event_name in COMMENT_EVENTS:
        body = context.comment_body
    elif context.event_name in ISSUE_EVENTS:
        body = context.issue_body
    elif context.event_name in PR_EVENTS:
        body = context.pr_body
    else:
        body = None

    return extract_user_request(body, trigger_phrase) or DEFAULT_REQUEST


def _body(payload: dict, key: str) -> str | None:
    section = payload.get(key) or {}
    return section.get("body")


def event_context_from_payload(event_name: str, payload: dict) -> EventContext:
    """Map a GitHub webhook payload onto an EventContext.

    Review events carry their text under ``review``; other comment events
    under ``comment``.
    """
    if event_name == "pull_request_review":
        comment_body = _body(payload, "review")
    else:
        comment_body = _body(payload, "comment")
    return EventContext(
        event_name=event_name,
        comment_body=comment_body,
        issue_body=_body(payload, "issue"),
        pr_body=_body(payload, "pull_request"),
    )


def load_event_context(event_name: str, event_path: str) -> EventContext:
    """Read the event payload JSON at event_path (GITHUB_EVENT_PATH)."""
    with open(event_path, encoding="utf-8") as f:
        payload = json.load(f)
    return event_context_from_payload(event_name, payload)


def write_user_request(directory: str, request: str) -> str:
    """Write the request next to the prompt file. Returns the file path."""
    os.makedirs(directory, exist_ok=True)
    path = Path(directory) / USER_REQUEST_FILENAME
    path.write_text(request, encoding="utf-8")
    logger.info("Wrote user request to %s", path)
    return str(path)
