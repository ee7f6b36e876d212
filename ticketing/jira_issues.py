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

"""Jira REST operations – label search, issue creation, user lookup,
watchers and comments against the Jira Cloud REST API (v2, wiki markup
bodies) using ``requests``.
"""

from __future__ import annotations

from typing import Any

import requests

from .common import vprint
from .models import TrackerAccount, TrackerError

REQUEST_TIMEOUT = 30


def _jql_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_label_jql(project_key: str, label: str) -> str:
    """JQL selecting issues in *project_key* labelled *label*, oldest first."""
    clauses: list[str] = []
    if project_key:
        clauses.append(f"project = {_jql_quote(project_key)}")
    clauses.append(f"labels = {_jql_quote(label)}")
    return " AND ".join(clauses) + " ORDER BY created ASC"


def pick_account(identity: str, users: list[dict[str, Any]]) -> TrackerAccount | None:
    """Choose the account matching *identity* from a user-search result.

    An exact e-mail, account id or display name match wins. Otherwise the
    result is accepted only when the search was unambiguous.
    """
    wanted = identity.strip().lower()
    candidates = [u for u in users or [] if isinstance(u, dict) and u.get("accountId")]
    for user in candidates:
        keys = (user.get("emailAddress"), user.get("accountId"), user.get("displayName"))
        if any(str(k or "").strip().lower() == wanted for k in keys):
            return _to_account(user)
    if len(candidates) == 1:
        return _to_account(candidates[0])
    return None


def _to_account(user: dict[str, Any]) -> TrackerAccount:
    account_id = str(user["accountId"])
    return TrackerAccount(
        account_id=account_id,
        display_name=str(user.get("displayName") or account_id),
    )


class JiraTicketClient:
    """Issue tracker client for Jira.

    *comment_role* restricts the visibility of posted comments to members
    of that project role.
    """

    def __init__(
        self,
        host: str,
        user: str,
        token: str,
        *,
        project_key: str = "",
        comment_role: str = "",
        session: requests.Session | None = None,
    ) -> None:
        host = host.strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        self.base_url = host
        self.project_key = project_key
        self.comment_role = comment_role
        self.session = session or requests.Session()
        self.session.auth = (user, token)
        self.session.headers.update({"Accept": "application/json"})

    # -------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/rest/api/2/{path.lstrip('/')}"
        resp = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        if resp.status_code >= 400:
            raise TrackerError(
                f"Jira request failed: {method} {url}\n"
                f"  Status : {resp.status_code}\n"
                f"  Body   : {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )
        if resp.status_code == 204 or not (resp.text or "").strip():
            return None
        return resp.json()

    # -------------------------------------------------------------------
    # TicketClient
    # -------------------------------------------------------------------

    def find_ticket_by_label(self, label: str) -> str | None:
        jql = build_label_jql(self.project_key, label)
        vprint(f"Jira search: {jql}")
        data = self._request(
            "GET",
            "search/jql",
            params={"jql": jql, "maxResults": 1, "fields": "key"},
        )
        issues = (data or {}).get("issues") or []
        if not issues:
            return None
        return str(issues[0].get("key") or issues[0].get("id"))

    def create_ticket(
        self,
        project_key: str,
        title: str,
        body: str,
        issue_type: str,
        labels: list[str],
        custom_fields: dict[str, Any],
    ) -> str:
        fields: dict[str, Any] = {
            "project": {"key": project_key},
            "summary": title,
            "description": body,
            "issuetype": {"name": issue_type},
            "labels": list(labels),
        }
        fields.update(custom_fields or {})
        data = self._request("POST", "issue", json={"fields": fields})
        key = (data or {}).get("key")
        if not key:
            raise TrackerError(f"Jira did not return an issue key: {data!r}")
        print(f"Created Jira issue {key}")
        return str(key)

    def resolve_account(self, identity: str) -> TrackerAccount | None:
        users = self._request("GET", "user/search", params={"query": identity})
        account = pick_account(identity, users if isinstance(users, list) else [])
        if account is None:
            vprint(f"No Jira account found for {identity!r}")
        return account

    def add_watcher(self, ticket_id: str, account_id: str) -> None:
        # The endpoint takes a bare JSON string, not an object.
        self._request("POST", f"issue/{ticket_id}/watchers", json=account_id)

    def add_comment(self, ticket_id: str, text: str) -> None:
        payload: dict[str, Any] = {"body": text}
        if self.comment_role:
            payload["visibility"] = {"type": "role", "value": self.comment_role}
        self._request("POST", f"issue/{ticket_id}/comment", json=payload)
