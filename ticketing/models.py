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

"""Tracker-agnostic data models and the client protocol every tracker
backend implements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class TrackerError(RuntimeError):
    """A call against the issue tracker failed."""

    def __init__(self, message: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


@dataclass(frozen=True)
class TrackerAccount:
    """A user account known to the tracker."""
    account_id: str
    display_name: str


@dataclass(frozen=True)
class TicketDraft:
    """Everything needed to create a ticket, built once per ensure call."""
    identity_key: str
    title: str
    body: str
    labels: tuple[str, ...]
    custom_fields: dict[str, Any] = field(default_factory=dict)


class TicketClient(Protocol):
    def find_ticket_by_label(self, label: str) -> str | None:
        """Return the id of the earliest ticket carrying *label*, or ``None``."""
        ...

    def create_ticket(
        self,
        project_key: str,
        title: str,
        body: str,
        issue_type: str,
        labels: list[str],
        custom_fields: dict[str, Any],
    ) -> str:
        """Create a ticket and return its id / key."""
        ...

    def resolve_account(self, identity: str) -> TrackerAccount | None:
        ...

    def add_watcher(self, ticket_id: str, account_id: str) -> None:
        ...

    def add_comment(self, ticket_id: str, text: str) -> None:
        ...
