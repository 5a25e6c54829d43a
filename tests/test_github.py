"""Tests for claude_ci.github -- validation, env var handling, body fetching."""

from unittest.mock import MagicMock, patch

import pytest

from claude_ci.github import _get_token, _validate_repo, fetch_event_context
from claude_ci.request import EventContext

# ---------------------------------------------------------------------------
# _validate_repo
# ---------------------------------------------------------------------------

class TestValidateRepo:
    def test_valid_owner_name(self):
        _validate_repo("owner/name")  # should not raise

    def test_empty_string(self):
        with pytest.raises(ValueError, match="Invalid repo format"):
            _validate_repo("")

    def test_no_slash(self):
        with pytest.raises(ValueError, match="Invalid repo format"):
            _validate_repo("no-slash")

    def test_too_many_slashes(self):
        with pytest.raises(ValueError, match="Invalid repo format"):
            _validate_repo("a/b/c")


# ---------------------------------------------------------------------------
# _get_token
# ---------------------------------------------------------------------------

class TestGetToken:
    def test_github_token_set(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test123")
        monkeypatch.delenv("GH_TOKEN", raising=False)
        assert _get_token() == "ghp_test123"

    def test_gh_token_fallback(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.setenv("GH_TOKEN", "ghp_fallback")
        assert _get_token() == "ghp_fallback"

    def test_neither_set_raises(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.delenv("GH_TOKEN", raising=False)
        with pytest.raises(RuntimeError, match="GitHub token not found"):
            _get_token()


# ---------------------------------------------------------------------------
# fetch_event_context
# ---------------------------------------------------------------------------

@pytest.fixture
def repo():
    repo = MagicMock()
    client = MagicMock()
    client.get_repo.return_value = repo
    with patch("claude_ci.github.get_client", return_value=client):
        yield repo


class TestFetchEventContext:
    def test_issue_comment(self, repo):
        repo.get_issue.return_value.get_comment.return_value.body = "@claude fix it"
        ctx = fetch_event_context("org/repo", "issue_comment", 7, comment_id=99)
        repo.get_issue.assert_called_once_with(7)
        repo.get_issue.return_value.get_comment.assert_called_once_with(99)
        assert ctx == EventContext(event_name="issue_comment",
                                   comment_body="@claude fix it")

    def test_review_comment(self, repo):
        repo.get_pull.return_value.get_comment.return_value.body = "@claude nit"
        ctx = fetch_event_context("org/repo", "pull_request_review_comment", 3,
                                  comment_id=5)
        repo.get_pull.return_value.get_comment.assert_called_once_with(5)
        assert ctx.comment_body == "@claude nit"

    def test_review(self, repo):
        repo.get_pull.return_value.get_review.return_value.body = "@claude add tests"
        ctx = fetch_event_context("org/repo", "pull_request_review", 3,
                                  comment_id=11)
        repo.get_pull.return_value.get_review.assert_called_once_with(11)
        assert ctx.comment_body == "@claude add tests"

    def test_comment_event_without_id(self, repo):
        ctx = fetch_event_context("org/repo", "issue_comment", 7)
        assert ctx == EventContext(event_name="issue_comment")
        repo.get_issue.assert_not_called()

    def test_issue(self, repo):
        repo.get_issue.return_value.body = "@claude implement"
        ctx = fetch_event_context("org/repo", "issues", 4)
        assert ctx.issue_body == "@claude implement"

    @pytest.mark.parametrize("event_name", ["pull_request", "pull_request_target"])
    def test_pull_request(self, repo, event_name):
        repo.get_pull.return_value.body = "@claude review"
        ctx = fetch_event_context("org/repo", event_name, 12)
        repo.get_pull.assert_called_once_with(12)
        assert ctx.pr_body == "@claude review"

    def test_unknown_event(self, repo):
        ctx = fetch_event_context("org/repo", "push", 1)
        assert ctx == EventContext(event_name="push")

    def test_invalid_repo(self):
        with pytest.raises(ValueError, match="Invalid repo format"):
            fetch_event_context("bad", "issues", 1)
