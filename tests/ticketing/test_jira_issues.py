import json

import pytest

from ticketing.jira_issues import JiraTicketClient, build_label_jql, pick_account
from ticketing.models import TrackerAccount, TrackerError


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = "" if payload is None else json.dumps(payload)

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []
        self.headers = {}
        self.auth = None

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return self.responses.pop(0)


def make_client(*responses, **kwargs):
    session = FakeSession(*responses)
    client = JiraTicketClient("example.atlassian.net", "bot", "secret", project_key="SEC", session=session, **kwargs)
    return client, session


def test_client_sets_auth_and_base_url():
    client, session = make_client()
    assert client.base_url == "https://example.atlassian.net"
    assert session.auth == ("bot", "secret")


def test_build_label_jql_quotes_values():
    jql = build_label_jql("SEC", 'pkg:"odd":1.0')
    assert jql == 'project = "SEC" AND labels = "pkg:\\"odd\\":1.0" ORDER BY created ASC'


def test_find_ticket_by_label_returns_first_key():
    client, session = make_client(FakeResponse(200, {"issues": [{"id": "10", "key": "SEC-1"}]}))
    assert client.find_ticket_by_label("lodash:4.17.21") == "SEC-1"

    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert url == "https://example.atlassian.net/rest/api/2/search/jql"
    assert kwargs["params"]["maxResults"] == 1
    assert 'labels = "lodash:4.17.21"' in kwargs["params"]["jql"]
    assert kwargs["timeout"] == 30


def test_find_ticket_by_label_none_when_no_match():
    client, _ = make_client(FakeResponse(200, {"issues": []}))
    assert client.find_ticket_by_label("nope") is None


def test_create_ticket_merges_custom_fields(capsys):
    client, session = make_client(FakeResponse(201, {"id": "10001", "key": "SEC-7"}))
    key = client.create_ticket(
        "SEC",
        "lodash (4.17.21) - HIGH",
        "body",
        "Bug",
        ["owner/repo", "lodash:4.17.21"],
        {"customfield_11633": {"value": "High"}},
    )
    assert key == "SEC-7"
    fields = session.requests[0][2]["json"]["fields"]
    assert fields["project"] == {"key": "SEC"}
    assert fields["issuetype"] == {"name": "Bug"}
    assert fields["labels"] == ["owner/repo", "lodash:4.17.21"]
    assert fields["customfield_11633"] == {"value": "High"}
    assert "SEC-7" in capsys.readouterr().out


def test_error_status_raises_tracker_error():
    client, _ = make_client(FakeResponse(400, {"errors": {"labels": "bad"}}))
    with pytest.raises(TrackerError) as excinfo:
        client.create_ticket("SEC", "t", "b", "Bug", [], {})
    assert excinfo.value.status == 400
    assert "bad" in excinfo.value.body


def test_resolve_account_prefers_exact_email():
    users = [
        {"accountId": "1", "displayName": "Alice Other", "emailAddress": "alice@other.com"},
        {"accountId": "2", "displayName": "Alice", "emailAddress": "a@x.com"},
    ]
    client, session = make_client(FakeResponse(200, users))
    assert client.resolve_account("A@x.com") == TrackerAccount(account_id="2", display_name="Alice")
    assert session.requests[0][2]["params"] == {"query": "A@x.com"}


def test_pick_account_ambiguous_or_empty():
    users = [{"accountId": "1", "displayName": "A"}, {"accountId": "2", "displayName": "B"}]
    assert pick_account("someone", users) is None
    assert pick_account("someone", []) is None
    assert pick_account("someone", [{"accountId": "9"}]) == TrackerAccount(account_id="9", display_name="9")


def test_add_watcher_posts_bare_account_id():
    client, session = make_client(FakeResponse(204))
    client.add_watcher("SEC-1", "acc-a")
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "https://example.atlassian.net/rest/api/2/issue/SEC-1/watchers")
    assert kwargs["json"] == "acc-a"


def test_add_comment_with_restricted_role():
    client, session = make_client(FakeResponse(201, {"id": "1"}), comment_role="Developers")
    client.add_comment("SEC-1", "hello")
    assert session.requests[0][2]["json"] == {
        "body": "hello",
        "visibility": {"type": "role", "value": "Developers"},
    }


def test_add_comment_unrestricted():
    client, session = make_client(FakeResponse(201, {"id": "1"}))
    client.add_comment("SEC-1", "hello")
    assert session.requests[0][2]["json"] == {"body": "hello"}
