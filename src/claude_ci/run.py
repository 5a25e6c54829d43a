#!/usr/bin/env python3
"""Run Claude on a prompt file via the Agent SDK and report the outcome.

Streams agent messages, logs a sanitized view of each one, saves the full
transcript to $RUNNER_TEMP/claude-execution-output.json, and turns the final
result message into step outputs and an exit code:

  conclusion          success | failure
  execution_file      transcript path (only if it was written)
  structured_output   JSON payload (only if a schema was requested and met)

Nothing is retried. The transcript write is best-effort; every other
failure ends the run with conclusion=failure.
"""

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from claude_agent_sdk import ResultMessage, query

from claude_ci import actions
from claude_ci.agentlog import dump_json, log_message, message_to_dict
from claude_ci.options import ParsedSdkOptions, options_for_logging
from claude_ci.prompt import create_prompt_config

logger = logging.getLogger(__name__)

EXECUTION_FILENAME = "claude-execution-output.json"
SUCCESS = "success"
FAILURE = "failure"


@dataclass
class RunOutcome:
    conclusion: str
    execution_file: str | None = None
    structured_output: str | None = None
    errors: list[str] = field(default_factory=list)
    reason: str = ""

    @property
    def success(self) -> bool:
        return self.conclusion == SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def execution_file_path() -> str:
    """Return the transcript path under RUNNER_TEMP (system temp dir if unset)."""
    base = os.environ.get("RUNNER_TEMP") or tempfile.gettempdir()
    return os.path.join(base, EXECUTION_FILENAME)


def write_transcript(messages: list, path: str) -> str | None:
    """Write all messages as a JSON array. Returns the path, or None on failure."""
    try:
        content = dump_json([message_to_dict(m) for m in messages])
        Path(path).write_text(content, encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        actions.warning(f"Failed to write execution file: {e}")
        return None
    logger.info("Log saved to %s", path)
    return path


def _field_count(value) -> int:
    if isinstance(value, (dict, list)):
        return len(value)
    return 1


def evaluate_result(
    result: ResultMessage, has_json_schema: bool,
    execution_file: str | None = None,
) -> RunOutcome:
    """Derive the run outcome from the final result message.

    When a schema was requested, a missing or empty structured_output fails
    the run even if the agent itself reported success.
    """
    is_success = result.subtype == SUCCESS
    outcome = RunOutcome(
        conclusion=SUCCESS if is_success else FAILURE,
        execution_file=execution_file,
    )

    if has_json_schema:
        structured = getattr(result, "structured_output", None)
        if is_success and structured:
            outcome.structured_output = json.dumps(structured)
            logger.info("Set structured_output with %d field(s)",
                        _field_count(structured))
        else:
            outcome.conclusion = FAILURE
            outcome.reason = (
                "--json-schema was provided but Claude did not return "
                f"structured_output. Result subtype: {result.subtype}"
            )
            actions.error(outcome.reason)
            return outcome

    if not is_success:
        errors = [str(e) for e in getattr(result, "errors", None) or []]
        if errors:
            actions.error(f"Execution failed: {', '.join(errors)}")
        outcome.errors = errors
        outcome.reason = f"Result subtype: {result.subtype}"

    return outcome


async def run_agent(
    prompt_path: str,
    parsed: ParsedSdkOptions,
    stream=None,
    execution_file: str | None = None,
) -> RunOutcome:
    """Run one agent session and return its outcome.

    ``stream`` defaults to claude_agent_sdk.query. It is called as
    ``stream(prompt=..., options=...)`` and must return an async iterator
    of SDK messages.
    """
    stream = stream or query
    prompt = create_prompt_config(prompt_path)
    execution_file = execution_file or execution_file_path()

    if not parsed.show_full_output:
        logger.info("Running Claude Code via SDK (full output hidden for security)...")
        logger.info("Rerun in debug mode or pass --show-full-output for full output.")

    logger.info("Running Claude with prompt from file: %s", prompt_path)
    logger.info("SDK options: %s",
                dump_json(options_for_logging(parsed.sdk_options)))

    messages = []
    result: ResultMessage | None = None
    try:
        async for message in stream(prompt=prompt.to_sdk(),
                                    options=parsed.sdk_options):
            messages.append(message)
            log_message(message, parsed.show_full_output)
            if isinstance(message, ResultMessage):
                result = message
    except Exception as e:
        logger.error("SDK execution error: %s", e)
        return RunOutcome(conclusion=FAILURE, reason=f"SDK execution error: {e}")

    written = write_transcript(messages, execution_file)

    if result is None:
        reason = "No result message received from Claude"
        actions.error(reason)
        return RunOutcome(conclusion=FAILURE, execution_file=written,
                          reason=reason)

    return evaluate_result(result, parsed.has_json_schema, execution_file=written)


def publish_outcome(outcome: RunOutcome) -> None:
    """Write the outcome as step outputs."""
    if outcome.execution_file:
        actions.set_output("execution_file", outcome.execution_file)
    actions.set_output("conclusion", outcome.conclusion)
    if outcome.structured_output is not None:
        actions.set_output("structured_output", outcome.structured_output)


def run(prompt_path: str, parsed: ParsedSdkOptions) -> int:
    """Run the agent on prompt_path. Returns the process exit code."""
    outcome = asyncio.run(run_agent(prompt_path, parsed))
    publish_outcome(outcome)
    if not outcome.success:
        logger.info("Run failed: %s", outcome.reason or outcome.conclusion)
    return outcome.exit_code
