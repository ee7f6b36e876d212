#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Watcher reconciliation – resolving requested watchers to tracker
accounts, adding the ones found and composing the summary comment.

An unresolvable watcher, or one whose lookup fails, is recorded, never
raised: it must not block the ticket or the remaining watchers. Tracker failures while adding a watcher
or posting the comment do propagate.
"""

from __future__ import annotations

import sys

from ticketing.common import vprint
from ticketing.models import TicketClient, TrackerAccount, TrackerError
from ticketing.templates import render_template

from .models import WatcherReport
from .templates import NO_WATCHERS_TEXT, NOT_FOUND_WATCHERS_TEXT, WATCHERS_TEXT


def format_accounts(accounts: list[TrackerAccount]) -> str:
    return ", ".join(a.display_name for a in accounts)


def format_quoted(identities: list[str]) -> str:
    return ", ".join(f'"{identity}"' for identity in identities)


def reconcile_watchers(client: TicketClient, ticket_id: str, watchers: list[str]) -> WatcherReport:
    report = WatcherReport()
    for watcher in watchers:
        try:
            account = client.resolve_account(watcher)
        except TrackerError as exc:
            print(f"WARN: could not resolve watcher {watcher!r}: {exc}", file=sys.stderr)
            report.not_found.append(watcher)
            continue
        if account is None:
            report.not_found.append(watcher)
            continue

        client.add_watcher(ticket_id, account.account_id)
        vprint(f"Added watcher {account.display_name} to {ticket_id}")
        report.added.append(account)
    return report


def build_watcher_comment(report: WatcherReport) -> str | None:
    """Compose the summary comment, or ``None`` when there is nothing to report."""
    if not report.added and not report.not_found:
        return None

    if report.added:
        text = render_template(WATCHERS_TEXT, {"watchers": format_accounts(report.added)})
    else:
        text = NO_WATCHERS_TEXT

    if report.not_found:
        text += "\n\n" + render_template(NOT_FOUND_WATCHERS_TEXT, {"watchers": format_quoted(report.not_found)})
    return text


def reconcile_and_comment(client: TicketClient, ticket_id: str, watchers: list[str]) -> WatcherReport:
    """Add *watchers* to *ticket_id* and post the summary comment if any."""
    report = reconcile_watchers(client, ticket_id, watchers)
    comment = build_watcher_comment(report)
    if comment is not None:
        client.add_comment(ticket_id, comment)
    if report.not_found:
        print(f"WARN: watchers not found for {ticket_id}: {format_quoted(report.not_found)}", file=sys.stderr)
    return report
