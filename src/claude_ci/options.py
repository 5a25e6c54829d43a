#!/usr/bin/env python3
"""Build ClaudeAgentOptions from CLI values."""

import dataclasses
import json
import logging
import os
from dataclasses import dataclass

from claude_agent_sdk import ClaudeAgentOptions

logger = logging.getLogger(__name__)


@dataclass
class ParsedSdkOptions:
    sdk_options: ClaudeAgentOptions
    show_full_output: bool = False
    has_json_schema: bool = False


def parse_list(value: str | None) -> list[str]:
    """Split a comma-separated value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_env_pairs(pairs: list[str] | None) -> dict[str, str]:
    """Parse KEY=VALUE strings into a dict."""
    env = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid env entry '{pair}', expected KEY=VALUE")
        env[key.strip()] = value
    return env


def resolve_file_value(value: str | None) -> str:
    """Resolve an inline value or @path to file contents."""
    if not value:
        return ""
    if value.startswith("@"):
        with open(value[1:], encoding="utf-8") as f:
            return f.read()
    return value


def parse_json_schema(value: str | None) -> dict | None:
    """Parse a JSON schema given inline or as @file. Returns None if unset."""
    text = resolve_file_value(value).strip()
    if not text:
        return None
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON schema: {e}") from e
    if not isinstance(schema, dict):
        raise ValueError("JSON schema must be a JSON object")
    return schema


def debug_enabled() -> bool:
    """True when the workflow runs with step debug logging (RUNNER_DEBUG=1)."""
    return os.environ.get("RUNNER_DEBUG") == "1"


def parse_sdk_options(
    model: str | None = None,
    max_turns: int | None = None,
    allowed_tools: str | None = None,
    disallowed_tools: str | None = None,
    system_prompt: str | None = None,
    append_system_prompt: str | None = None,
    permission_mode: str | None = None,
    cwd: str | None = None,
    env: list[str] | None = None,
    json_schema: str | None = None,
    show_full_output: bool = False,
) -> ParsedSdkOptions:
    """Translate CLI values into ParsedSdkOptions.

    An explicit system prompt replaces the default one; an appended prompt
    extends the claude_code preset instead.
    """
    kwargs = {}
    if model:
        kwargs["model"] = model
    if max_turns is not None:
        kwargs["max_turns"] = max_turns
    if allowed_tools:
        kwargs["allowed_tools"] = parse_list(allowed_tools)
    if disallowed_tools:
        kwargs["disallowed_tools"] = parse_list(disallowed_tools)
    if system_prompt:
        kwargs["system_prompt"] = resolve_file_value(system_prompt)
    elif append_system_prompt:
        kwargs["system_prompt"] = {
            "type": "preset",
            "preset": "claude_code",
            "append": resolve_file_value(append_system_prompt),
        }
    if permission_mode:
        kwargs["permission_mode"] = permission_mode
    if cwd:
        kwargs["cwd"] = cwd
    env_vars = parse_env_pairs(env)
    if env_vars:
        kwargs["env"] = env_vars

    schema = parse_json_schema(json_schema)
    if schema is not None:
        kwargs["output_format"] = {"type": "json_schema", "schema": schema}

    return ParsedSdkOptions(
        sdk_options=ClaudeAgentOptions(**kwargs),
        show_full_output=show_full_output or debug_enabled(),
        has_json_schema=schema is not None,
    )


def options_for_logging(options: ClaudeAgentOptions) -> dict:
    """Return option fields without env, which may hold secrets."""
    return {
        field.name: getattr(options, field.name)
        for field in dataclasses.fields(options)
        if field.name != "env"
    }
