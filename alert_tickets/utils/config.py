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


"""Run configuration – a single validated :class:`AppConfig` built once
at start-up from CLI arguments and the environment.

Environment variables
---------------------
TRACKER                        ``jira`` (default) or ``github``.
GITHUB_REPOSITORY              owner/repo the alerts belong to.
GITHUB_TOKEN                   token for the ``github`` tracker.
JIRA_HOST, JIRA_USER, JIRA_TOKEN
                               Jira site and API credentials.
JIRA_PROJECT                   project key new issues are created in.
JIRA_ISSUE_TYPE                issue type name (default ``Bug``).
JIRA_ISSUE_LABELS              comma-separated extra labels.
JIRA_WATCHERS                  comma-separated watcher e-mails / usernames.
JIRA_RESTRICTED_COMMENT_ROLE   restrict the watcher comment to this project role.
JIRA_SEVERITY_FIELD            custom field id for the severity value.
JIRA_CREATED_DATE_FIELD        custom field id for the alert date.
JIRA_STORY_POINTS_FIELD, JIRA_STORY_POINTS
                               story points custom field id and value.
JIRA_EPIC_LINK_FIELD, JIRA_EPIC_KEY
                               epic link custom field id and epic key.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from dataclasses import dataclass, field

from ticketing.common import split_csv

from .issue_builder import MARKUP_JIRA, MARKUP_MARKDOWN
from .models import CustomFieldConfig

TRACKER_JIRA = "jira"
TRACKER_GITHUB = "github"
TRACKERS = (TRACKER_JIRA, TRACKER_GITHUB)

DEFAULT_ISSUE_TYPE = "Bug"


@dataclass(frozen=True)
class JiraSettings:
    host: str
    user: str
    token: str
    comment_role: str = ""


@dataclass(frozen=True)
class AppConfig:
    tracker: str
    repo: str
    project_key: str = ""
    issue_type: str = DEFAULT_ISSUE_TYPE
    extra_labels: tuple[str, ...] = ()
    watchers: tuple[str, ...] = ()
    custom_fields: CustomFieldConfig = field(default_factory=CustomFieldConfig)
    jira: JiraSettings | None = None
    github_token: str = ""
    dry_run: bool = False

    @property
    def markup(self) -> str:
        return MARKUP_MARKDOWN if self.tracker == TRACKER_GITHUB else MARKUP_JIRA


def _env(env: Mapping[str, str], key: str) -> str:
    return (env.get(key) or "").strip()


def _require(env: Mapping[str, str], key: str, *, reason: str) -> str:
    value = _env(env, key)
    if not value:
        raise SystemExit(f"ERROR: missing required environment variable {key} ({reason})")
    return value


def _parse_story_points(raw: str) -> float | None:
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise SystemExit(f"ERROR: JIRA_STORY_POINTS must be a number, got {raw!r}") from exc


def _paired(env: Mapping[str, str], field_key: str, value_key: str) -> tuple[str, str]:
    field_id = _env(env, field_key)
    value = _env(env, value_key)
    if bool(field_id) != bool(value):
        raise SystemExit(f"ERROR: {field_key} and {value_key} must be set together")
    return field_id, value


def load_custom_fields(env: Mapping[str, str]) -> CustomFieldConfig:
    story_points_field, story_points_raw = _paired(env, "JIRA_STORY_POINTS_FIELD", "JIRA_STORY_POINTS")
    epic_link_field, epic_key = _paired(env, "JIRA_EPIC_LINK_FIELD", "JIRA_EPIC_KEY")
    return CustomFieldConfig(
        severity_field=_env(env, "JIRA_SEVERITY_FIELD"),
        created_date_field=_env(env, "JIRA_CREATED_DATE_FIELD"),
        story_points_field=story_points_field,
        story_points=_parse_story_points(story_points_raw),
        epic_link_field=epic_link_field,
        epic_key=epic_key,
    )


def load_config(args: argparse.Namespace, env: Mapping[str, str], *, file_repo: str = "") -> AppConfig:
    """Build and validate the run configuration.

    CLI arguments win over the environment; the repository falls back to
    the one named in the alerts file. Problems raise ``SystemExit``.
    """
    tracker = (getattr(args, "tracker", None) or _env(env, "TRACKER") or TRACKER_JIRA).lower()
    if tracker not in TRACKERS:
        raise SystemExit(f"ERROR: unsupported tracker {tracker!r} (expected one of {', '.join(TRACKERS)})")

    repo = getattr(args, "repo", None) or _env(env, "GITHUB_REPOSITORY") or file_repo
    if not repo:
        raise SystemExit("ERROR: repository unknown. Pass --repo, set GITHUB_REPOSITORY or add repo.full_name to the alerts file.")

    labels_raw = getattr(args, "labels", None)
    watchers_raw = getattr(args, "watchers", None)

    jira: JiraSettings | None = None
    project_key = ""
    github_token = ""
    if tracker == TRACKER_JIRA:
        project_key = _require(env, "JIRA_PROJECT", reason="Jira project key")
        jira = JiraSettings(
            host=_require(env, "JIRA_HOST", reason="Jira site"),
            user=_require(env, "JIRA_USER", reason="Jira user"),
            token=_require(env, "JIRA_TOKEN", reason="Jira API token"),
            comment_role=_env(env, "JIRA_RESTRICTED_COMMENT_ROLE"),
        )
    else:
        github_token = _require(env, "GITHUB_TOKEN", reason="GitHub tracker")

    return AppConfig(
        tracker=tracker,
        repo=repo,
        project_key=project_key,
        issue_type=_env(env, "JIRA_ISSUE_TYPE") or DEFAULT_ISSUE_TYPE,
        extra_labels=tuple(split_csv(labels_raw if labels_raw is not None else _env(env, "JIRA_ISSUE_LABELS"))),
        watchers=tuple(split_csv(watchers_raw if watchers_raw is not None else _env(env, "JIRA_WATCHERS"))),
        custom_fields=load_custom_fields(env),
        jira=jira,
        github_token=github_token,
        dry_run=bool(getattr(args, "dry_run", False)),
    )
