# tests/test_cli.py

import json

import pytest
from click.testing import CliRunner

from taskbridge import cli as cli_module
from taskbridge.cli import cli
from taskbridge.config import Config
from taskbridge.jira.client import JiraClient
from taskbridge.jira.exceptions import JiraAPIError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def jira_client(jira_api, monkeypatch):
    client = JiraClient(
        "https://example.atlassian.net", "ada@example.com", "secret", api=jira_api
    )
    monkeypatch.setattr(cli_module, "_open_client", lambda platform_type: client)
    return client


class TestCli:
    def test_platforms(self, runner, monkeypatch):
        monkeypatch.setattr(
            Config, "configured_platforms", classmethod(lambda cls: ["jira"])
        )
        result = runner.invoke(cli, ["platforms"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].split() == ["jira", "Jira", "configured"]
        assert lines[1].split() == ["linear", "Linear", "not", "configured"]

    def test_unsupported_platform(self, runner):
        result = runner.invoke(cli, ["tasks", "slack"])
        assert result.exit_code == 2

    def test_tasks(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli, ["tasks", "jira", "--status", "open", "--project", "TEST"]
        )

        assert result.exit_code == 0, result.output
        assert "TEST-1" in result.output
        assert "1 task(s)" in result.output
        jql = jira_api.search_issues.await_args.args[0]
        assert jql == 'status = "To Do" AND project = "TEST" ORDER BY created DESC'
        jira_api.close.assert_awaited()

    def test_show(self, runner, jira_client):
        result = runner.invoke(cli, ["show", "jira", "TEST-1"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["id"] == "TEST-1"
        assert data["status"] == "in_progress"

    def test_show_not_found(self, runner, jira_client, jira_api):
        jira_api.get_issue.side_effect = JiraAPIError("missing", status_code=404)

        result = runner.invoke(cli, ["show", "jira", "TEST-404"])

        assert result.exit_code == 1
        assert "[not_found]" in result.output
        assert "(task: TEST-404)" in result.output

    def test_create_requires_project(self, runner, jira_client, jira_api):
        result = runner.invoke(cli, ["create", "jira", "New task"])

        assert result.exit_code == 1
        assert "[invalid_input]" in result.output
        jira_api.create_issue.assert_not_awaited()

    def test_create(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli,
            ["create", "jira", "New task", "--project", "TEST", "--priority", "high"],
        )

        assert result.exit_code == 0, result.output
        assert "Created TEST-1" in result.output
        fields = jira_api.create_issue.await_args.args[0]
        assert fields["summary"] == "New task"
        assert fields["priority"] == {"name": "High"}

    def test_delete(self, runner, jira_client, jira_api):
        result = runner.invoke(cli, ["delete", "jira", "TEST-1"])

        assert result.exit_code == 0
        jira_api.delete_issue.assert_awaited_once_with("TEST-1")

    def test_whoami(self, runner, jira_client, jira_api):
        jira_api.get_myself.return_value = {
            "accountId": "acc-1",
            "displayName": "Ada",
            "emailAddress": "ada@example.com",
        }
        result = runner.invoke(cli, ["whoami", "jira"])
        assert result.output.strip() == "Ada <ada@example.com> (acc-1)"

    def test_health_without_platforms(self, runner, monkeypatch):
        monkeypatch.setattr(Config, "configured_platforms", classmethod(lambda cls: []))
        result = runner.invoke(cli, ["health"])
        assert result.exit_code == 0
        assert "No platforms configured." in result.output

    def test_health_reports_failures(self, runner, monkeypatch, jira_client, jira_api):
        monkeypatch.setattr(
            Config, "configured_platforms", classmethod(lambda cls: ["jira"])
        )
        jira_api.get_myself.side_effect = JiraAPIError("denied", status_code=401)

        result = runner.invoke(cli, ["health"])

        assert result.exit_code == 1
        assert "[authentication_failed]" in result.output


class TestCliWrites:
    def test_tasks_offset(self, runner, jira_client, jira_api):
        result = runner.invoke(cli, ["tasks", "jira", "--limit", "5", "--offset", "10"])

        assert result.exit_code == 0, result.output
        jira_api.search_issues.assert_awaited_once_with(
            "ORDER BY created DESC", start_at=10, max_results=5
        )

    def test_create_with_assignee_and_due(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli,
            [
                "create",
                "jira",
                "New task",
                "--project",
                "TEST",
                "--assignee",
                "acc-7",
                "--due",
                "2024-05-01",
            ],
        )

        assert result.exit_code == 0, result.output
        fields = jira_api.create_issue.await_args.args[0]
        assert fields["assignee"] == {"accountId": "acc-7"}
        assert fields["duedate"] == "2024-05-01"

    def test_create_rejects_bad_due_date(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli, ["create", "jira", "New task", "--project", "TEST", "--due", "May 1"]
        )
        assert result.exit_code == 2
        jira_api.create_issue.assert_not_awaited()

    def test_update_status_runs_transition(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli,
            ["update", "jira", "TEST-1", "--status", "done", "--title", "Renamed"],
        )

        assert result.exit_code == 0, result.output
        assert "Updated TEST-1" in result.output
        jira_api.do_transition.assert_awaited_once_with("10001", "31")
        issue_id, fields = jira_api.update_issue.await_args.args
        assert issue_id == "10001"
        assert fields["summary"] == "Renamed"

    def test_update_fields_without_status(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli,
            ["update", "jira", "TEST-1", "--priority", "low", "--label", "ui"],
        )

        assert result.exit_code == 0, result.output
        jira_api.do_transition.assert_not_awaited()
        fields = jira_api.update_issue.await_args.args[1]
        assert fields["priority"] == {"name": "Low"}
        assert fields["labels"] == ["bug", "backend", "ui"]

    def test_update_missing_transition(self, runner, jira_client, jira_api):
        result = runner.invoke(
            cli, ["update", "jira", "TEST-1", "--status", "cancelled"]
        )

        assert result.exit_code == 1
        assert "[platform_api_error]" in result.output
        jira_api.update_issue.assert_not_awaited()

    def test_json_errors(self, runner, jira_client, jira_api):
        jira_api.get_issue.side_effect = JiraAPIError("missing", status_code=404)

        result = runner.invoke(cli, ["--json", "show", "jira", "TEST-404"])

        assert result.exit_code == 1
        error = json.loads(result.output.strip().splitlines()[-1])
        assert error == {
            "code": "not_found",
            "message": "Resource not found",
            "platform": "jira",
            "task_id": "TEST-404",
        }
