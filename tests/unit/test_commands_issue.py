"""Tests for the /issue command."""

import pytest

from sentinel_bot.adapters.github import GitHubAPIError
from sentinel_bot.commands import issue
from sentinel_bot.models.github import IssueState
from sentinel_bot.models.reply import EMBED_TOTAL_LIMIT, Color, ReplyPayload
from sentinel_bot.models.repository import RepositoryRef

REPO = "octocat/Hello-World"
HELLO = RepositoryRef("octocat", "Hello-World")


class TestBuildIssueDetail:
    """Tests for build_issue_detail()."""

    def test_open_issue(self, make_issue) -> None:
        payload = issue.build_issue_detail(
            make_issue(labels=("bug", "help wanted"), assignees=("hubot",), comments=4)
        )

        assert payload.title == "Issue #1347: Found a bug"
        assert payload.color == Color.GREEN
        fields = {f.name: f.value for f in payload.fields}
        assert fields["State"] == "🟢 Open"
        assert fields["Author"] == "[octocat](https://github.com/octocat)"
        assert fields["Labels"] == "bug, help wanted"
        assert fields["Assignees"] == "hubot"
        assert fields["Comments"] == "4"
        assert payload.buttons[0].url == "https://github.com/octocat/Hello-World/issues/1347"

    def test_closed_issue_without_extras(self, make_issue) -> None:
        payload = issue.build_issue_detail(make_issue(state=IssueState.CLOSED, body=""))

        assert payload.color == Color.RED
        assert payload.description == "No description"
        names = [f.name for f in payload.fields]
        assert names == ["State", "Author", "Created", "Updated"]

    def test_long_body_truncated(self, make_issue) -> None:
        payload = issue.build_issue_detail(make_issue(body="z" * 2000))

        assert payload.description is not None
        assert len(payload.description) == issue.BODY_LENGTH


class TestBuildIssueList:
    def test_labels_capped(self, make_issue) -> None:
        payload = issue.build_issue_list(
            HELLO, "open", [make_issue(labels=("a", "b", "c", "d"))]
        )

        assert payload.title == "Open Issues in octocat/Hello-World"
        assert payload.description == "Showing 1 issue"
        assert payload.fields[0].name == "#1347: Found a bug"
        assert payload.fields[0].value.endswith("Labels: a, b, c")

    def test_all_state_heading(self, make_issue) -> None:
        payload = issue.build_issue_list(HELLO, "all", [make_issue(), make_issue(number=2)])

        assert payload.title == "All Issues in octocat/Hello-World"
        assert payload.color == Color.BLUE
        assert payload.description == "Showing 2 issues"


class TestViewIssue:
    """Tests for /issue view."""

    async def test_view(self, make_request, github, make_issue) -> None:
        github.get_issue.return_value = make_issue()
        request, channel = make_request("issue", "view", repo=REPO, number=1347)

        await issue.handle(request, github)

        github.get_issue.assert_awaited_once_with("octocat", "Hello-World", 1347)
        assert isinstance(channel.last_reply, ReplyPayload)

    @pytest.mark.parametrize("number", [0, -5, None])
    async def test_invalid_number(self, make_request, github, number) -> None:
        options = {"repo": REPO}
        if number is not None:
            options["number"] = number
        request, channel = make_request("issue", "view", **options)

        await issue.handle(request, github)

        assert channel.calls == [("send", "Please provide a valid issue number.", True)]
        github.get_issue.assert_not_awaited()

    async def test_not_found(self, make_request, github) -> None:
        github.get_issue.side_effect = GitHubAPIError("Not Found", status=404)
        request, channel = make_request("issue", "view", repo=REPO, number=9999)

        await issue.handle(request, github)

        assert channel.last_reply == (
            "Repository octocat/Hello-World not found or issue doesn't exist."
        )


class TestListIssues:
    """Tests for /issue list."""

    async def test_defaults(self, make_request, github, make_issue) -> None:
        github.list_issues.return_value = [make_issue()]
        request, _ = make_request("issue", "list", repo=REPO)

        await issue.handle(request, github)

        github.list_issues.assert_awaited_once_with(
            "octocat", "Hello-World", state="open", per_page=10
        )

    async def test_state_and_limit(self, make_request, github, make_issue) -> None:
        github.list_issues.return_value = [make_issue(state=IssueState.CLOSED)]
        request, channel = make_request("issue", "list", repo=REPO, state="closed", limit=100)

        await issue.handle(request, github)

        github.list_issues.assert_awaited_once_with(
            "octocat", "Hello-World", state="closed", per_page=25
        )
        assert channel.last_reply.color == Color.RED

    async def test_empty(self, make_request, github) -> None:
        github.list_issues.return_value = []
        request, channel = make_request("issue", "list", repo=REPO, state="all")

        await issue.handle(request, github)

        assert channel.last_reply == "No all issues found in octocat/Hello-World."

    async def test_long_titles_fit_embed_limit(self, make_request, github, make_issue) -> None:
        """Test a full page of maximum-length titles still fits one embed."""
        github.list_issues.return_value = [
            make_issue(number=n, title="T" * 256, labels=("bug", "enhancement", "question"))
            for n in range(1, 26)
        ]
        request, channel = make_request("issue", "list", repo=REPO, limit=25)

        await issue.handle(request, github)

        payload = channel.last_reply
        assert isinstance(payload, ReplyPayload)
        assert payload.total_length <= EMBED_TOTAL_LIMIT
        assert payload.fields[0].name.startswith("#1")
