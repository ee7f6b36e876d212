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

"""GitHub Issues operations via PyGithub – list-by-label, create, user
lookup, assignees and comments.

GitHub has no API to subscribe another user to an issue, so watchers are
added as assignees. Project key, issue type and custom fields have no
GitHub counterpart and are ignored. Labels longer than GitHub allows are
shortened by ``github_label``.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from github import Auth, Github, GithubException, UnknownObjectException

from .common import sha256_hex, vprint
from .models import TrackerAccount, TrackerError

T = TypeVar("T")

MAX_LABEL_LENGTH = 50
LABEL_HASH_LENGTH = 8


def github_label(label: str) -> str:
    """Fit *label* into GitHub's 50-character limit.

    Longer labels keep a readable prefix and end with a short hash of the
    full text, so the same input always maps to the same label.
    """
    if len(label) <= MAX_LABEL_LENGTH:
        return label
    prefix = label[: MAX_LABEL_LENGTH - LABEL_HASH_LENGTH - 1]
    return f"{prefix}~{sha256_hex(label)[:LABEL_HASH_LENGTH]}"


def _call(what: str, fn: Callable[[], T]) -> T:
    try:
        return fn()
    except GithubException as exc:
        raise TrackerError(
            f"GitHub request failed ({what}): {exc.status} {exc.data}",
            status=exc.status,
            body=str(exc.data),
        ) from exc


class GitHubTicketClient:
    def __init__(self, repo_full: str, token: str = "", *, gh: Github | None = None) -> None:
        self.repo_full = repo_full
        self.gh = gh or Github(auth=Auth.Token(token))
        self.repo = _call("get repo", lambda: self.gh.get_repo(repo_full))

    def find_ticket_by_label(self, label: str) -> str | None:
        label = github_label(label)

        def first_issue() -> Any:
            for issue in self.repo.get_issues(state="all", labels=[label], sort="created", direction="asc"):
                # The issues API also returns pull requests.
                if getattr(issue, "pull_request", None):
                    continue
                return issue
            return None

        issue = _call("list issues", first_issue)
        return str(issue.number) if issue is not None else None

    def create_ticket(
        self,
        project_key: str,
        title: str,
        body: str,
        issue_type: str,
        labels: list[str],
        custom_fields: dict[str, Any],
    ) -> str:
        if custom_fields:
            vprint(f"GitHub Issues has no custom fields; ignoring {sorted(custom_fields)}")
        issue = _call(
            "create issue",
            lambda: self.repo.create_issue(title=title, body=body, labels=[github_label(name) for name in labels]),
        )
        print(f"Created issue #{issue.number} in {self.repo_full}")
        return str(issue.number)

    def _get_user_or_none(self, login: str) -> Any:
        try:
            return self.gh.get_user(login)
        except UnknownObjectException:
            return None

    def resolve_account(self, identity: str) -> TrackerAccount | None:
        identity = identity.strip().lstrip("@")
        if "@" in identity:
            user = _call(
                "search users",
                lambda: next(iter(self.gh.search_users(f"{identity} in:email")), None),
            )
        else:
            user = _call("get user", lambda: self._get_user_or_none(identity))
        if user is None:
            vprint(f"No GitHub user found for {identity!r}")
            return None
        return TrackerAccount(account_id=user.login, display_name=f"@{user.login}")

    def add_watcher(self, ticket_id: str, account_id: str) -> None:
        issue = _call("get issue", lambda: self.repo.get_issue(int(ticket_id)))
        _call("add assignee", lambda: issue.add_to_assignees(account_id))

    def add_comment(self, ticket_id: str, text: str) -> None:
        issue = _call("get issue", lambda: self.repo.get_issue(int(ticket_id)))
        _call("comment", lambda: issue.create_comment(text))
