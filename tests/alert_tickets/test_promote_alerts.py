import json

import pytest

from alert_tickets import promote_alerts
from alert_tickets.utils.config import AppConfig
from ticketing.jira_issues import JiraTicketClient

from conftest import FakeTicketClient


ALERT_NODE = {
    "state": "OPEN",
    "vulnerableManifestPath": "package-lock.json",
    "securityVulnerability": {
        "package": {"name": "lodash", "ecosystem": "NPM"},
        "firstPatchedVersion": {"identifier": "4.17.21"},
        "vulnerableVersionRange": "< 4.17.21",
        "severity": "HIGH",
        "updatedAt": "2021-02-15T12:00:00Z",
        "advisory": {"ghsaId": "GHSA-xxxx", "description": "desc", "references": []},
    },
}


@pytest.fixture
def alerts_file(tmp_path):
    path = tmp_path / "alerts.json"
    path.write_text(json.dumps({"repo": {"full_name": "owner/repo"}, "alerts": [ALERT_NODE]}), encoding="utf-8")
    return str(path)


@pytest.fixture
def jira_env(monkeypatch):
    monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
    monkeypatch.delenv("TRACKER", raising=False)
    monkeypatch.delenv("RUNNER_DEBUG", raising=False)
    monkeypatch.delenv("JIRA_WATCHERS", raising=False)
    monkeypatch.delenv("JIRA_ISSUE_LABELS", raising=False)
    for key, value in {
        "JIRA_HOST": "example.atlassian.net",
        "JIRA_USER": "bot",
        "JIRA_TOKEN": "secret",
        "JIRA_PROJECT": "SEC",
    }.items():
        monkeypatch.setenv(key, value)


def test_main_creates_then_finds(monkeypatch, alerts_file, jira_env, capsys):
    client = FakeTicketClient()
    monkeypatch.setattr(promote_alerts, "build_ticket_client", lambda config: client)

    promote_alerts.main(["--file", alerts_file, "--labels", "security"])
    promote_alerts.main(["--file", alerts_file])

    assert list(client.tickets) == ["SEC-1"]
    assert client.tickets["SEC-1"]["labels"] == ["owner/repo", "lodash:4.17.21", "security"]
    out = capsys.readouterr().out
    assert "Done: 1 created, 0 already tracked" in out
    assert "Done: 0 created, 1 already tracked" in out


def test_main_dry_run(monkeypatch, alerts_file, jira_env, capsys):
    client = FakeTicketClient()
    monkeypatch.setattr(promote_alerts, "build_ticket_client", lambda config: client)

    promote_alerts.main(["--file", alerts_file, "--dry-run"])

    assert client.mutations == []
    assert "1 would be created" in capsys.readouterr().out


def test_main_reports_creation_failure(monkeypatch, alerts_file, jira_env, capsys):
    client = FakeTicketClient()
    client.create_error = RuntimeError("tracker down")
    monkeypatch.setattr(promote_alerts, "build_ticket_client", lambda config: client)

    with pytest.raises(SystemExit) as excinfo:
        promote_alerts.main(["--file", alerts_file])

    assert excinfo.value.code == 1
    assert "ERROR: Could not create issue: tracker down" in capsys.readouterr().err


def test_build_ticket_client_for_jira(alerts_file, jira_env):
    args = promote_alerts.parse_args(["--file", alerts_file])
    config = promote_alerts.load_config(args, {
        "JIRA_HOST": "example.atlassian.net",
        "JIRA_USER": "bot",
        "JIRA_TOKEN": "secret",
        "JIRA_PROJECT": "SEC",
    }, file_repo="owner/repo")
    client = promote_alerts.build_ticket_client(config)
    assert isinstance(client, JiraTicketClient)
    assert client.project_key == "SEC"


def test_build_ticket_client_without_jira_settings_exits():
    with pytest.raises(SystemExit) as excinfo:
        promote_alerts.build_ticket_client(AppConfig(tracker="jira", repo="owner/repo"))
    assert "Jira settings are missing" in str(excinfo.value)
