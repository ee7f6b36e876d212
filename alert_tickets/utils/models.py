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


"""Security-specific data models."""

from dataclasses import dataclass, field

from ticketing.models import TrackerAccount


@dataclass(frozen=True)
class AlertRecord:
    """One Dependabot vulnerability alert, as read from the alerts file."""
    package: str
    ecosystem: str
    vulnerable_range: str
    safe_version: str | None
    advisory_id: str
    severity: str
    description: str
    references: tuple[str, ...]
    manifest_path: str      # directory of the manifest, "." for the repo root
    updated_at: str


@dataclass
class WatcherReport:
    """Outcome of resolving the requested watchers for one ticket."""
    added: list[TrackerAccount] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)


@dataclass
class SyncResult:
    """Aggregated output of a full sync run."""
    created: list[tuple[str, str]] = field(default_factory=list)     # (identity_key, ticket_id)
    existing: list[tuple[str, str]] = field(default_factory=list)    # (identity_key, ticket_id)
    planned: list[str] = field(default_factory=list)                 # identity keys (dry-run)

    def summary(self) -> str:
        parts = [f"{len(self.created)} created", f"{len(self.existing)} already tracked"]
        if self.planned:
            parts.append(f"{len(self.planned)} would be created")
        return ", ".join(parts)


@dataclass(frozen=True)
class CustomFieldConfig:
    """Deployment-specific tracker custom field ids; unset fields are skipped."""
    severity_field: str = ""
    created_date_field: str = ""
    story_points_field: str = ""
    story_points: float | None = None
    epic_link_field: str = ""
    epic_key: str = ""


@dataclass(frozen=True)
class EnsureOutcome:
    """Result of one ensure call."""
    identity_key: str
    ticket_id: str | None   # None only for a dry-run that would create
    state: str              # "found", "created" or "planned"
    watchers: WatcherReport | None = None
