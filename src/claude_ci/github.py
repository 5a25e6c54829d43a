"""GitHub client using PyGithub.

Used by extract-request when no event payload file is available, e.g. when
a workflow is re-dispatched for an existing comment.
"""

import functools
import logging
import os

from github import Github

from claude_ci.request import COMMENT_EVENTS, ISSUE_EVENTS, PR_EVENTS, EventContext

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def get_client() -> Github:
    """Create a Github client from GITHUB_TOKEN or GH_TOKEN env var.

    Cached for the lifetime of the process since the token comes from
    environment variables which don't change during a run.
    """
    return Github(_get_token())


def _get_token() -> str:
    """Return the GitHub token from environment."""
    token = os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
    if not token:
        raise RuntimeError(
            "GitHub token not found. Set GITHUB_TOKEN or GH_TOKEN environment variable."
        )
    return token


def _validate_repo(repo_slug: str) -> None:
    """Validate that repo_slug is in 'owner/name' format."""
    if not repo_slug or repo_slug.count("/") != 1:
        raise ValueError(
            f"Invalid repo format: '{repo_slug}'. Expected 'owner/name'."
        )


def _comment_body(repo, event_name: str, number: int, comment_id: int) -> str:
    if event_name == "issue_comment":
        return repo.get_issue(number).get_comment(comment_id).body
    pull = repo.get_pull(number)
    if event_name == "pull_request_review":
        return pull.get_review(comment_id).body
    return pull.get_comment(comment_id).body


def fetch_event_context(
    repo_slug: str,
    event_name: str,
    number: int,
    comment_id: int | None = None,
) -> EventContext:
    """Load the body relevant to event_name for issue/PR `number`.

    Comment events need comment_id (the review id for pull_request_review).
    Unknown events return an empty context.
    """
    _validate_repo(repo_slug)
    context = EventContext(event_name=event_name)
    repo = get_client().get_repo(repo_slug)

    if event_name in COMMENT_EVENTS:
        if comment_id is None:
            logger.warning("No comment id given for %s, cannot fetch body",
                           event_name)
            return context
        context.comment_body = _comment_body(repo, event_name, number, comment_id)
    elif event_name in ISSUE_EVENTS:
        context.issue_body = repo.get_issue(number).body
    elif event_name in PR_EVENTS:
        context.pr_body = repo.get_pull(number).body

    return context
