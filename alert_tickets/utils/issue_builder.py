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


"""Ticket title / body / labels / custom fields construction from alert
records. Everything here is pure: no tracker calls.
"""

from __future__ import annotations

import textwrap
from typing import Any

from ticketing.common import iso_date, split_csv
from ticketing.models import TicketDraft
from ticketing.templates import render_template

from .identity import identity_key
from .models import AlertRecord, CustomFieldConfig
from .severity import map_severity
from .templates import (
    JIRA_BODY_TEMPLATE,
    JIRA_LINK_BULLET,
    JIRA_LINKS_TEMPLATE,
    MARKDOWN_BODY_TEMPLATE,
    MARKDOWN_LINK_BULLET,
    MARKDOWN_LINKS_TEMPLATE,
)

MARKUP_JIRA = "jira"
MARKUP_MARKDOWN = "markdown"

NO_FIX = "no fix"
WRAP_WIDTH = 100


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def wrap_description(text: str | None, width: int = WRAP_WIDTH) -> str:
    """Wrap long lines at *width* columns, breaking on spaces only.

    Existing line breaks are kept and words longer than *width* are never
    split.
    """
    wrapped: list[str] = []
    for line in (text or "").splitlines():
        if len(line) <= width:
            wrapped.append(line)
            continue
        wrapped.extend(
            textwrap.wrap(line, width=width, break_long_words=False, break_on_hyphens=False)
        )
    return "\n".join(wrapped)


def _code_fence(text: str) -> str:
    fence = "```"
    while fence in text:
        fence += "`"
    return fence


def repo_url(repo: str) -> str:
    return f"https://github.com/{repo}" if repo else ""


# ---------------------------------------------------------------------------
# Title / body / labels
# ---------------------------------------------------------------------------

def build_ticket_title(alert: AlertRecord) -> str:
    return f"{alert.package} ({alert.safe_version or NO_FIX}) - {alert.severity}"


def build_ticket_body(alert: AlertRecord, *, repo: str, markup: str = MARKUP_JIRA) -> str:
    """Render the ticket body in the requested *markup* flavour."""
    if markup == MARKUP_JIRA:
        body_template, links_template, bullet = JIRA_BODY_TEMPLATE, JIRA_LINKS_TEMPLATE, JIRA_LINK_BULLET
    elif markup == MARKUP_MARKDOWN:
        body_template, links_template, bullet = (
            MARKDOWN_BODY_TEMPLATE,
            MARKDOWN_LINKS_TEMPLATE,
            MARKDOWN_LINK_BULLET,
        )
    else:
        raise ValueError(f"Unsupported markup: {markup!r}")

    links_section = ""
    if alert.references:
        links_section = render_template(
            links_template,
            {"links": [f"{bullet}{url}" for url in alert.references]},
        )

    description = wrap_description(alert.description)
    values: dict[str, Any] = {
        "repo": repo,
        "repo_url": repo_url(repo),
        "package": alert.package,
        "ecosystem": alert.ecosystem or "",
        "vulnerable_range": alert.vulnerable_range,
        "safe_version": alert.safe_version or NO_FIX,
        "links_section": links_section,
        "description": description,
        "fence": _code_fence(description),
    }
    return render_template(body_template, values)


def build_ticket_labels(repo: str, key: str, extra_labels: str | list[str] | None = None) -> tuple[str, ...]:
    """Repository name, identity key, then the configured extra labels."""
    if isinstance(extra_labels, str) or extra_labels is None:
        extra = split_csv(extra_labels)
    else:
        extra = split_csv(",".join(extra_labels))

    labels: list[str] = []
    for label in [repo, key, *extra]:
        if label and label not in labels:
            labels.append(label)
    return tuple(labels)


# ---------------------------------------------------------------------------
# Custom fields
# ---------------------------------------------------------------------------

def build_custom_fields(alert: AlertRecord, fields: CustomFieldConfig | None = None) -> dict[str, Any]:
    """Build the tracker custom field values configured for this deployment.

    The severity is always validated, even when no severity field is
    configured, so a malformed alert never turns into a ticket.
    """
    fields = fields or CustomFieldConfig()
    severity_value = map_severity(alert.severity)

    custom: dict[str, Any] = {}
    if fields.created_date_field:
        custom[fields.created_date_field] = iso_date(alert.updated_at)
    if fields.severity_field:
        custom[fields.severity_field] = {"value": severity_value}
    if fields.story_points_field and fields.story_points is not None:
        custom[fields.story_points_field] = fields.story_points
    if fields.epic_link_field and fields.epic_key:
        custom[fields.epic_link_field] = fields.epic_key
    return custom


def build_ticket_draft(
    alert: AlertRecord,
    *,
    repo: str,
    extra_labels: str | list[str] | None = None,
    custom_fields: CustomFieldConfig | None = None,
    markup: str = MARKUP_JIRA,
) -> TicketDraft:
    """Turn *alert* into the :class:`TicketDraft` submitted on creation."""
    key = identity_key(alert)
    return TicketDraft(
        identity_key=key,
        title=build_ticket_title(alert),
        body=build_ticket_body(alert, repo=repo, markup=markup),
        labels=build_ticket_labels(repo, key, extra_labels),
        custom_fields=build_custom_fields(alert, custom_fields),
    )
