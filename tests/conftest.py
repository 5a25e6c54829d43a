"""Shared fixtures and helpers for claude_ci tests."""

import pytest
from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    SystemMessage,
    TextBlock,
)

from claude_ci.options import ParsedSdkOptions


def make_result(subtype="success", structured_output=None, errors=None,
                permission_denials=None, **overrides):
    """Build a ResultMessage with sensible defaults.

    structured_output, errors and permission_denials are set as attributes
    after construction so the helper works across SDK versions.
    """
    fields = {
        "subtype": subtype,
        "duration_ms": 1200,
        "duration_api_ms": 900,
        "is_error": subtype != "success",
        "num_turns": 3,
        "session_id": "session-1",
        "total_cost_usd": 0.0123,
        "usage": None,
        "result": "done",
    }
    fields.update(overrides)
    message = ResultMessage(**fields)
    message.structured_output = structured_output
    if errors is not None:
        message.errors = errors
    if permission_denials is not None:
        message.permission_denials = permission_denials
    return message


def make_init(model="claude-sonnet-4-5"):
    """Build a system/init message."""
    data = {"type": "system", "subtype": "init", "session_id": "session-1",
            "cwd": "/work", "tools": ["Read"]}
    if model is not None:
        data["model"] = model
    return SystemMessage(subtype="init", data=data)


def make_assistant(text="Looking at the diff...", model="claude-sonnet-4-5"):
    return AssistantMessage(content=[TextBlock(text=text)], model=model)


class FakeStream:
    """Callable standing in for claude_agent_sdk.query.

    Yields the given messages in order, then raises ``error`` if set.
    Records every call's prompt and options.
    """

    def __init__(self, *messages, error=None):
        self.messages = list(messages)
        self.error = error
        self.calls = []

    def __call__(self, *, prompt, options):
        self.calls.append({"prompt": prompt, "options": options})

        async def _gen():
            for message in self.messages:
                yield message
            if self.error is not None:
                raise self.error

        return _gen()


def make_parsed(show_full_output=False, has_json_schema=False, **options):
    return ParsedSdkOptions(
        sdk_options=ClaudeAgentOptions(**options),
        show_full_output=show_full_output,
        has_json_schema=has_json_schema,
    )


@pytest.fixture
def prompt_file(tmp_path):
    """A prompt file with no user request next to it."""
    path = tmp_path / "prompt.txt"
    path.write_text("Review the pull request in this repository.\n")
    return path


@pytest.fixture
def github_output(tmp_path, monkeypatch):
    """Point GITHUB_OUTPUT at a temp file and return its path."""
    path = tmp_path / "github_output"
    path.write_text("")
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path


def read_outputs(path):
    """Parse single-line name=value entries from a GITHUB_OUTPUT file."""
    outputs = {}
    for line in path.read_text().splitlines():
        name, sep, value = line.partition("=")
        if sep:
            outputs[name] = value
    return outputs


# Sample data constants

SAMPLE_SCHEMA = {
    "type": "object",
    "properties": {
        "verdict": {"type": "string"},
        "issues": {"type": "integer"},
    },
    "required": ["verdict"],
}

SAMPLE_EVENT_PAYLOADS = {
    "issue_comment": {
        "comment": {"body": "@claude /review-pr please check the auth module"},
        "issue": {"body": "Login fails on Safari"},
    },
    "pull_request_review": {
        "review": {"body": "@claude looks good but add tests"},
        "pull_request": {"body": "Adds OAuth support"},
    },
    "issues": {
        "issue": {"body": "@claude please implement this feature"},
    },
    "pull_request": {
        "pull_request": {"body": "@claude review this PR"},
    },
}
