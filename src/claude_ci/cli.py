#!/usr/bin/env python3
"""Unified CLI for claude-ci -- run Claude on a prompt file in CI."""

import argparse
import logging
import os
import sys

from claude_ci import __version__


def _resolve_event_context(args):
    """Build the EventContext from the payload file, the API, or nothing."""
    from claude_ci.request import EventContext, load_event_context

    logger = logging.getLogger(__name__)
    if args.event_path and os.path.exists(args.event_path):
        return load_event_context(args.event_name, args.event_path)
    if args.repo and args.number is not None:
        from claude_ci.github import fetch_event_context
        return fetch_event_context(
            args.repo, args.event_name, args.number, comment_id=args.comment_id,
        )
    logger.warning("No event payload found, using default request")
    return EventContext(event_name=args.event_name)


def cmd_extract_request(args):
    from claude_ci.request import extract_user_request_from_event, write_user_request

    context = _resolve_event_context(args)
    request = extract_user_request_from_event(context, args.trigger_phrase)
    write_user_request(args.output_dir, request)
    return 0


def cmd_run(args):
    from claude_ci.options import parse_sdk_options
    from claude_ci.run import run

    logger = logging.getLogger(__name__)
    try:
        parsed = parse_sdk_options(
            model=args.model,
            max_turns=args.max_turns,
            allowed_tools=args.allowed_tools,
            disallowed_tools=args.disallowed_tools,
            system_prompt=args.system_prompt,
            append_system_prompt=args.append_system_prompt,
            permission_mode=args.permission_mode,
            cwd=args.cwd,
            env=args.env,
            json_schema=args.json_schema,
            show_full_output=args.show_full_output,
        )
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return run(args.prompt_file, parsed)


def main():
    parser = argparse.ArgumentParser(
        prog="claude-ci",
        description="Run Claude on a prompt file in CI and report the outcome",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable debug logging (verbose output)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Run Claude Agent SDK on a prompt file",
    )
    p_run.add_argument(
        "--prompt-file", required=True,
        help="Path to the prompt file; claude-user-request.txt next to it is sent last",
    )
    p_run.add_argument(
        "--model", default=None,
        help="Claude model (default: SDK default)",
    )
    p_run.add_argument(
        "--max-turns", type=int, default=None,
        help="Maximum agent turns (default: unlimited)",
    )
    p_run.add_argument(
        "--allowed-tools", default="",
        help="Comma-separated list of allowed tools (default: none)",
    )
    p_run.add_argument(
        "--disallowed-tools", default="",
        help="Comma-separated list of disallowed tools (default: none)",
    )
    p_run.add_argument(
        "--system-prompt", default="",
        help="System prompt replacing the default one (inline text or @file)",
    )
    p_run.add_argument(
        "--append-system-prompt", default="",
        help="Text appended to the default system prompt (inline text or @file)",
    )
    p_run.add_argument(
        "--permission-mode", default=None,
        choices=["default", "acceptEdits", "plan", "bypassPermissions"],
        help="Tool permission mode (default: SDK default)",
    )
    p_run.add_argument(
        "--cwd", default=None,
        help="Working directory for the agent (default: current directory)",
    )
    p_run.add_argument(
        "--env", action="append", default=[], metavar="KEY=VALUE",
        help="Environment variable for the agent process (repeatable, never logged)",
    )
    p_run.add_argument(
        "--json-schema", default="",
        help="JSON schema the result must satisfy (inline JSON or @file)",
    )
    p_run.add_argument(
        "--show-full-output", action="store_true",
        help="Log every agent message in full (also enabled by RUNNER_DEBUG=1)",
    )
    p_run.set_defaults(func=cmd_run)

    # --- extract-request ---
    p_extract = subparsers.add_parser(
        "extract-request",
        help="Extract the user's request after the trigger phrase",
    )
    p_extract.add_argument(
        "--trigger-phrase", default="@claude",
        help="Trigger phrase that addresses the agent (default: @claude)",
    )
    p_extract.add_argument(
        "--output-dir", required=True,
        help="Directory of the prompt file; claude-user-request.txt is written here",
    )
    p_extract.add_argument(
        "--event-name", default=os.environ.get("GITHUB_EVENT_NAME", ""),
        help="GitHub event name (default: $GITHUB_EVENT_NAME)",
    )
    p_extract.add_argument(
        "--event-path", default=os.environ.get("GITHUB_EVENT_PATH", ""),
        help="Path to the event payload JSON (default: $GITHUB_EVENT_PATH)",
    )
    p_extract.add_argument(
        "--repo", default=os.environ.get("GITHUB_REPOSITORY", ""),
        help="Repository (owner/name) to fetch the body from when no payload exists",
    )
    p_extract.add_argument(
        "--number", type=int, default=None,
        help="Issue or PR number to fetch the body from",
    )
    p_extract.add_argument(
        "--comment-id", type=int, default=None,
        help="Comment or review id for comment events",
    )
    p_extract.set_defaults(func=cmd_extract_request)

    args = parser.parse_args()

    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=(
            "%(message)s" if level == logging.INFO
            else "%(asctime)s %(name)s %(levelname)s %(message)s"
        ),
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
