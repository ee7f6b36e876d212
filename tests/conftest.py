from dataclasses import replace
from typing import Any

import pytest

from alert_tickets.utils.models import AlertRecord
from ticketing.common import set_verbose_enabled
from ticketing.models import TrackerAccount


LODASH_ALERT = AlertRecord(
    package="lodash",
    ecosystem="npm",
    vulnerable_range="<4.17.21",
    safe_version="4.17.21",
    advisory_id="GHSA-xxxx",
    severity="HIGH",
    description="Prototype pollution in lodash.",
    references=("https://example.com/a",),
    manifest_path=".",
    updated_at="2021-02-15T12:00:00Z",
)


class FakeTicketClient:
    """In-memory tracker that persists created tickets."""

    def __init__(self, accounts: dict[str, TrackerAccount] | None = None) -> None:
        self.accounts = accounts or {}
        self.tickets: dict[str, dict[str, Any]] = {}
        self.watchers: dict[str, list[str]] = {}
        self.comments: dict[str, list[str]] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.create_error: Exception | None = None
        self._next_id = 1

    @property
    def mutations(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] in {"create", "add_watcher", "add_comment"}]

    def find_ticket_by_label(self, label):
        self.calls.append(("find", label))
        for ticket_id, ticket in self.tickets.items():
            if label in ticket["labels"]:
                return ticket_id
        return None

    def create_ticket(self, project_key, title, body, issue_type, labels, custom_fields):
        self.calls.append(("create", title))
        if self.create_error is not None:
            raise self.create_error
        ticket_id = f"SEC-{self._next_id}"
        self._next_id += 1
        self.tickets[ticket_id] = {
            "project_key": project_key,
            "title": title,
            "body": body,
            "issue_type": issue_type,
            "labels": list(labels),
            "custom_fields": dict(custom_fields),
        }
        return ticket_id

    def resolve_account(self, identity):
        self.calls.append(("resolve", identity))
        return self.accounts.get(identity)

    def add_watcher(self, ticket_id, account_id):
        self.calls.append(("add_watcher", ticket_id, account_id))
        self.watchers.setdefault(ticket_id, []).append(account_id)

    def add_comment(self, ticket_id, text):
        self.calls.append(("add_comment", ticket_id, text))
        self.comments.setdefault(ticket_id, []).append(text)


@pytest.fixture(autouse=True)
def _reset_verbose():
    set_verbose_enabled(False)
    yield
    set_verbose_enabled(False)


@pytest.fixture
def make_alert():
    def _make(**overrides: Any) -> AlertRecord:
        return replace(LODASH_ALERT, **overrides)
    return _make


@pytest.fixture
def fake_client():
    return FakeTicketClient(
        accounts={
            "a@x.com": TrackerAccount(account_id="acc-a", display_name="Alice"),
            "b@x.com": TrackerAccount(account_id="acc-b", display_name="Bob"),
        }
    )
