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


"""Core sync orchestration – checks the tracker for a ticket carrying the
alert's identity key, creates the ticket when absent, then reconciles
watchers.

Ensure state machine::

    CHECKING -> FOUND                          (existing id, no side effects)
    CHECKING -> CREATING -> WATCHING -> done   (new id)

The ensurer holds no lock. Running two ensure calls for the same identity
key at the same time is the caller's responsibility to avoid.
"""

from __future__ import annotations

from ticketing.common import vprint
from ticketing.models import TicketClient, TicketDraft

from .config import AppConfig
from .errors import CreationFailure
from .identity import identity_key
from .issue_builder import MARKUP_JIRA, build_ticket_draft
from .models import AlertRecord, CustomFieldConfig, EnsureOutcome, SyncResult
from .watchers import format_quoted, reconcile_and_comment

STATE_FOUND = "found"
STATE_CREATED = "created"
STATE_PLANNED = "planned"


def find_existing_ticket(client: TicketClient, key: str) -> str | None:
    """Return the id of the ticket labelled *key*, or ``None``."""
    return client.find_ticket_by_label(key)


class TicketEnsurer:
    """Idempotent "create the ticket for this alert unless it exists"."""

    def __init__(
        self,
        client: TicketClient,
        *,
        repo: str,
        project_key: str = "",
        issue_type: str = "Bug",
        extra_labels: tuple[str, ...] | list[str] = (),
        watchers: tuple[str, ...] | list[str] = (),
        custom_fields: CustomFieldConfig | None = None,
        markup: str = MARKUP_JIRA,
        dry_run: bool = False,
    ) -> None:
        self.client = client
        self.repo = repo
        self.project_key = project_key
        self.issue_type = issue_type
        self.extra_labels = list(extra_labels)
        self.watchers = list(watchers)
        self.custom_fields = custom_fields or CustomFieldConfig()
        self.markup = markup
        self.dry_run = dry_run

    @classmethod
    def from_config(cls, client: TicketClient, config: AppConfig) -> TicketEnsurer:
        return cls(
            client,
            repo=config.repo,
            project_key=config.project_key,
            issue_type=config.issue_type,
            extra_labels=config.extra_labels,
            watchers=config.watchers,
            custom_fields=config.custom_fields,
            markup=config.markup,
            dry_run=config.dry_run,
        )

    def build_draft(self, alert: AlertRecord) -> TicketDraft:
        return build_ticket_draft(
            alert,
            repo=self.repo,
            extra_labels=self.extra_labels,
            custom_fields=self.custom_fields,
            markup=self.markup,
        )

    def _create(self, draft: TicketDraft) -> str:
        try:
            return self.client.create_ticket(
                self.project_key,
                draft.title,
                draft.body,
                self.issue_type,
                list(draft.labels),
                dict(draft.custom_fields),
            )
        except Exception as exc:
            raise CreationFailure(f"Could not create issue: {exc}") from exc

    def _print_plan(self, draft: TicketDraft) -> None:
        print(f"DRY-RUN: would create issue {draft.title!r} labels={list(draft.labels)}")
        if draft.custom_fields:
            print(f"DRY-RUN: custom fields {draft.custom_fields}")
        if self.watchers:
            print(f"DRY-RUN: would add watchers {format_quoted(self.watchers)}")

    def ensure_outcome(self, alert: AlertRecord) -> EnsureOutcome:
        key = identity_key(alert)

        # CHECKING
        existing = find_existing_ticket(self.client, key)
        if existing is not None:
            vprint(f"Issue {existing} already tracks {key}")
            return EnsureOutcome(identity_key=key, ticket_id=existing, state=STATE_FOUND)

        # CREATING
        draft = self.build_draft(alert)
        if self.dry_run:
            self._print_plan(draft)
            return EnsureOutcome(identity_key=key, ticket_id=None, state=STATE_PLANNED)
        ticket_id = self._create(draft)

        # WATCHING
        report = reconcile_and_comment(self.client, ticket_id, self.watchers)
        return EnsureOutcome(identity_key=key, ticket_id=ticket_id, state=STATE_CREATED, watchers=report)

    def ensure(self, alert: AlertRecord) -> str | None:
        """Return the id of the ticket tracking *alert*, creating it if needed.

        ``None`` only in dry-run mode, for a ticket that would be created.
        """
        return self.ensure_outcome(alert).ticket_id


def sync_alerts_to_tickets(alerts: list[AlertRecord], ensurer: TicketEnsurer) -> SyncResult:
    """Ensure a ticket for every alert, in order.

    Alerts sharing an identity key (the same package and fix in several
    lock files of one directory, for instance) are ensured once; the
    tracker's search index may not show a ticket created moments ago.

    Failures propagate and stop the run; tickets created before the failure
    are kept and will be found again on the next run.
    """
    result = SyncResult()
    handled: set[str] = set()
    for alert in alerts:
        key = identity_key(alert)
        if key in handled:
            vprint(f"Skip duplicate alert {alert.advisory_id} for {key}")
            continue
        handled.add(key)

        outcome = ensurer.ensure_outcome(alert)
        if outcome.state == STATE_FOUND:
            result.existing.append((outcome.identity_key, str(outcome.ticket_id)))
        elif outcome.state == STATE_CREATED:
            print(f"{outcome.identity_key}: created {outcome.ticket_id}")
            result.created.append((outcome.identity_key, str(outcome.ticket_id)))
        else:
            result.planned.append(outcome.identity_key)
    return result
