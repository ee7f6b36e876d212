import pytest

from alert_tickets.utils.models import WatcherReport
from alert_tickets.utils.watchers import build_watcher_comment, reconcile_and_comment, reconcile_watchers
from ticketing.models import TrackerAccount, TrackerError


def test_partial_resolution_is_reported_not_raised(fake_client, capsys):
    report = reconcile_and_comment(fake_client, "SEC-1", ["a@x.com", "ghost@x.com"])

    assert [a.account_id for a in report.added] == ["acc-a"]
    assert report.not_found == ["ghost@x.com"]
    assert fake_client.watchers == {"SEC-1": ["acc-a"]}

    [comment] = fake_client.comments["SEC-1"]
    assert "The following users have been added as watchers: Alice." in comment
    assert 'Could not find tracker accounts for the following watchers: "ghost@x.com".' in comment
    assert "ghost@x.com" in capsys.readouterr().err


def test_unresolvable_watcher_does_not_block_later_ones(fake_client):
    report = reconcile_watchers(fake_client, "SEC-1", ["ghost@x.com", "a@x.com", "b@x.com"])
    assert [a.display_name for a in report.added] == ["Alice", "Bob"]


def test_no_watchers_no_comment(fake_client):
    report = reconcile_and_comment(fake_client, "SEC-1", [])
    assert report == WatcherReport()
    assert fake_client.mutations == []


def test_comment_when_nobody_resolves():
    comment = build_watcher_comment(WatcherReport(not_found=["x", "y"]))
    assert comment == (
        "No watchers have been added to this issue.\n\n"
        'Could not find tracker accounts for the following watchers: "x", "y".'
    )


def test_comment_when_everybody_resolves():
    report = WatcherReport(added=[TrackerAccount("1", "Alice"), TrackerAccount("2", "Bob")])
    assert build_watcher_comment(report) == "The following users have been added as watchers: Alice, Bob."


def test_nothing_to_report():
    assert build_watcher_comment(WatcherReport()) is None


def test_failed_lookup_is_reported_and_later_watchers_still_added(fake_client, capsys):
    original = fake_client.resolve_account

    def resolve(identity):
        if identity == "weird@x.com":
            raise TrackerError("user search failed", status=400)
        return original(identity)

    fake_client.resolve_account = resolve
    report = reconcile_and_comment(fake_client, "SEC-1", ["weird@x.com", "a@x.com"])

    assert report.not_found == ["weird@x.com"]
    assert fake_client.watchers == {"SEC-1": ["acc-a"]}
    [comment] = fake_client.comments["SEC-1"]
    assert "Alice" in comment
    assert '"weird@x.com"' in comment
    assert "user search failed" in capsys.readouterr().err


def test_add_watcher_failure_propagates(fake_client):
    def fail(ticket_id, account_id):
        raise TrackerError("forbidden", status=403)

    fake_client.add_watcher = fail
    with pytest.raises(TrackerError):
        reconcile_watchers(fake_client, "SEC-1", ["a@x.com"])
