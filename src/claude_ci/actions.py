#!/usr/bin/env python3
"""GitHub Actions step outputs and workflow-command annotations."""

import logging
import os
import uuid

logger = logging.getLogger(__name__)


def _in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def _escape_data(message: str) -> str:
    """Escape a workflow command message (%, CR and LF)."""
    return (
        message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    )


def _command(name: str, message: str) -> None:
    if _in_actions():
        print(f"::{name}::{_escape_data(message)}", flush=True)


def set_output(name: str, value: str) -> None:
    """Append a step output to the GITHUB_OUTPUT file.

    Multi-line values use a random heredoc delimiter. Outside of Actions the
    value is only logged.
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("Output %s=%s (GITHUB_OUTPUT not set)", name, value)
        return
    with open(output_file, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")


def warning(message: str) -> None:
    logger.warning("%s", message)
    _command("warning", message)


def error(message: str) -> None:
    """Log and annotate an error. The exit code is left to the caller."""
    logger.error("%s", message)
    _command("error", message)
