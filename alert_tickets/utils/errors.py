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


"""Exceptions raised by the ticket ensure workflow."""


class TicketSyncError(Exception):
    """Base class for failures of the alert → ticket workflow."""


class CreationFailure(TicketSyncError):
    """The tracker rejected or failed the create call."""


class UnmappedSeverity(TicketSyncError, ValueError):
    """The alert severity has no tracker value."""

    def __init__(self, severity: str) -> None:
        super().__init__(f"Unmapped severity: {severity!r}")
        self.severity = severity
