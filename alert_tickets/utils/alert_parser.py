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


"""Alert data parsing – turning Dependabot alert payloads into
:class:`AlertRecord` values and loading the alerts JSON file.

Two payload shapes are understood:

- GraphQL ``vulnerabilityAlerts`` nodes (``securityVulnerability`` /
  ``vulnerableManifestPath``),
- REST ``dependabot/alerts`` items (``security_vulnerability`` /
  ``dependency.manifest_path``).
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any

from ticketing.common import vprint

from .identity import manifest_dir
from .models import AlertRecord


def _dig(data: Any, *keys: str) -> Any:
    cur = data
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _str(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _reference_urls(refs: Any) -> tuple[str, ...]:
    urls: list[str] = []
    for ref in refs or []:
        url = ref.get("url") if isinstance(ref, dict) else ref
        if isinstance(url, str) and url.strip():
            urls.append(url.strip())
    return tuple(urls)


def _parse_graphql_alert(node: dict[str, Any]) -> AlertRecord:
    vuln = node.get("securityVulnerability") or {}
    advisory = vuln.get("advisory") or {}
    return AlertRecord(
        package=_str(_dig(vuln, "package", "name")),
        ecosystem=_str(_dig(vuln, "package", "ecosystem")),
        vulnerable_range=_str(vuln.get("vulnerableVersionRange")),
        safe_version=_str(_dig(vuln, "firstPatchedVersion", "identifier")) or None,
        advisory_id=_str(advisory.get("ghsaId")),
        severity=_str(vuln.get("severity") or advisory.get("severity")),
        description=str(advisory.get("description") or ""),
        references=_reference_urls(advisory.get("references")),
        manifest_path=manifest_dir(node.get("vulnerableManifestPath")),
        updated_at=_str(vuln.get("updatedAt") or node.get("updatedAt") or advisory.get("updatedAt")),
    )


def _parse_rest_alert(item: dict[str, Any]) -> AlertRecord:
    vuln = item.get("security_vulnerability") or {}
    advisory = item.get("security_advisory") or {}
    package = vuln.get("package") or _dig(item, "dependency", "package") or {}
    return AlertRecord(
        package=_str(package.get("name")),
        ecosystem=_str(package.get("ecosystem")),
        vulnerable_range=_str(vuln.get("vulnerable_version_range")),
        safe_version=_str(_dig(vuln, "first_patched_version", "identifier")) or None,
        advisory_id=_str(advisory.get("ghsa_id")),
        severity=_str(vuln.get("severity") or advisory.get("severity")),
        description=str(advisory.get("description") or ""),
        references=_reference_urls(advisory.get("references")),
        manifest_path=manifest_dir(_dig(item, "dependency", "manifest_path")),
        updated_at=_str(item.get("updated_at") or advisory.get("updated_at")),
    )


def parse_alert(raw: dict[str, Any]) -> AlertRecord:
    """Build an :class:`AlertRecord` from one alert payload.

    Raises ``ValueError`` when the package name or advisory id is missing;
    everything else degrades to empty values.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"alert must be an object, got {type(raw).__name__}")

    if "securityVulnerability" in raw:
        alert = _parse_graphql_alert(raw)
    elif "security_vulnerability" in raw or "security_advisory" in raw:
        alert = _parse_rest_alert(raw)
    else:
        raise ValueError("unrecognised alert payload (no securityVulnerability / security_vulnerability)")

    if not alert.package:
        raise ValueError("alert has no package name")
    if not alert.advisory_id:
        raise ValueError(f"alert for package {alert.package!r} has no advisory id")
    return alert


def is_active_alert(raw: dict[str, Any]) -> bool:
    """``False`` for dismissed, fixed or auto-dismissed alerts."""
    state = _str(raw.get("state")).lower()
    if state and state != "open":
        return False
    return not (raw.get("dismissedAt") or raw.get("dismissed_at"))


def _unwrap_alerts_document(data: Any) -> tuple[str, list[Any]]:
    if isinstance(data, list):
        return "", data

    if not isinstance(data, dict):
        return "", []

    repository = _dig(data, "data", "repository")
    if isinstance(repository, dict):
        nodes = _dig(repository, "vulnerabilityAlerts", "nodes") or []
        return _str(repository.get("nameWithOwner")), list(nodes)

    repo_full = _str(_dig(data, "repo", "full_name"))
    return repo_full, list(data.get("alerts") or [])


def load_alerts_from_file(path: str) -> tuple[str, list[AlertRecord]]:
    """Read an alerts JSON file and return ``(repo_full, active_alerts)``.

    *repo_full* is ``""`` when the file does not name the repository.
    """
    if not os.path.exists(path):
        raise SystemExit(f"ERROR: alerts file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SystemExit(f"ERROR: alerts file {path} is not valid JSON: {exc}") from exc

    repo_full, raw_alerts = _unwrap_alerts_document(data)
    print(f"Loaded {len(raw_alerts)} alerts from {path}" + (f" (repo={repo_full})" if repo_full else ""))

    alerts: list[AlertRecord] = []
    for raw in raw_alerts:
        if isinstance(raw, dict) and not is_active_alert(raw):
            vprint(f"Skip alert: state={raw.get('state')!r} dismissed_at={raw.get('dismissedAt') or raw.get('dismissed_at')!r}")
            continue
        try:
            alert = parse_alert(raw)
        except ValueError as exc:
            print(f"WARN: skipping malformed alert: {exc}", file=sys.stderr)
            continue

        if os.getenv("DEBUG_ALERTS") == "1":
            print(
                f"DEBUG: full alert payload for {alert.package} ({alert.advisory_id}):\n"
                + json.dumps(raw, indent=2, sort_keys=True)
            )
        alerts.append(alert)

    print(f"Found {len(alerts)} active alerts")
    return repo_full, alerts
