#!/usr/bin/env python3
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


"""Promote Dependabot vulnerability alerts JSON into tracker tickets.

Input:
- JSON with the repository's vulnerability alerts (default: alerts.json),
  either ``{"repo": {"full_name": ...}, "alerts": [...]}``, a raw GraphQL
  ``vulnerabilityAlerts`` response, or a bare list of alerts.

Design intent:
- One ticket per vulnerable package + manifest directory + fix state.
- Match tickets strictly by the identity-key label; existing tickets are
  never edited.
- Report watchers that could not be resolved in a comment on the new
  ticket instead of failing.

Requirements:
- Jira (default): JIRA_HOST, JIRA_USER, JIRA_TOKEN, JIRA_PROJECT
- GitHub Issues (``--tracker github``): GITHUB_TOKEN

Draft / debug (no writes):
    `python3 -m alert_tickets.promote_alerts --file alerts.json --dry-run --verbose`
"""

from __future__ import annotations

import argparse
import os
import sys

from ticketing.common import parse_runner_debug, set_verbose_enabled
from ticketing.github_issues import GitHubTicketClient
from ticketing.jira_issues import JiraTicketClient
from ticketing.models import TicketClient, TrackerError

from alert_tickets.utils.alert_parser import load_alerts_from_file
from alert_tickets.utils.config import TRACKER_GITHUB, TRACKERS, AppConfig, load_config
from alert_tickets.utils.errors import TicketSyncError
from alert_tickets.utils.issue_sync import TicketEnsurer, sync_alerts_to_tickets


def build_ticket_client(config: AppConfig) -> TicketClient:
    if config.tracker == TRACKER_GITHUB:
        return GitHubTicketClient(config.repo, config.github_token)

    if config.jira is None:
        raise SystemExit("ERROR: Jira settings are missing (JIRA_HOST, JIRA_USER, JIRA_TOKEN)")
    return JiraTicketClient(
        config.jira.host,
        config.jira.user,
        config.jira.token,
        project_key=config.project_key,
        comment_role=config.jira.comment_role,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Promote Dependabot alerts JSON to tracker tickets")
    p.add_argument(
        "--file",
        "-f",
        default="alerts.json",
        help="alerts JSON file (default: alerts.json)",
    )
    p.add_argument(
        "--tracker",
        choices=TRACKERS,
        default=None,
        help="issue tracker to create tickets in (default: $TRACKER or jira)",
    )
    p.add_argument(
        "--repo",
        default=None,
        help="repository in owner/repo format (default: $GITHUB_REPOSITORY or the alerts file)",
    )
    p.add_argument(
        "--labels",
        default=None,
        help="comma-separated extra labels (default: $JIRA_ISSUE_LABELS)",
    )
    p.add_argument(
        "--watchers",
        default=None,
        help="comma-separated watcher e-mails / usernames (default: $JIRA_WATCHERS)",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Only look up existing tickets; print the tickets and watchers that would be created",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())

    file_repo, alerts = load_alerts_from_file(args.file)
    config = load_config(args, os.environ, file_repo=file_repo)
    if not alerts:
        print("No active alerts – nothing to do")
        return

    ensurer = TicketEnsurer.from_config(build_ticket_client(config), config)
    try:
        result = sync_alerts_to_tickets(alerts, ensurer)
    except (TicketSyncError, TrackerError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"Done: {result.summary()}")


if __name__ == "__main__":
    main()
