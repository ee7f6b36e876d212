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


"""Alert severity vocabulary and its mapping to the tracker's severity
field values.
"""

from __future__ import annotations

from enum import StrEnum

from .errors import UnmappedSeverity


class Severity(StrEnum):
    """Severity levels reported by GitHub security advisories."""
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


SEVERITY_LEVELS: dict[str, str] = {
    Severity.LOW: "Low",
    Severity.MODERATE: "Medium",
    Severity.HIGH: "High",
    Severity.CRITICAL: "Critical",
}


def map_severity(severity: str) -> str:
    """Return the tracker value for *severity*, e.g. ``MODERATE`` -> ``Medium``.

    Raises :class:`UnmappedSeverity` for anything outside the vocabulary.
    """
    try:
        return SEVERITY_LEVELS[Severity(str(severity or "").strip().upper())]
    except ValueError as exc:
        raise UnmappedSeverity(severity) from exc
