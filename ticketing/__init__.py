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


"""Tracker-agnostic ticket plumbing.

Modules
-------
common          Shared low-level utilities (verbose logging, dates, paths, CSV config values).
templates       ``{{ placeholder }}`` template rendering.
models          TicketDraft, TrackerAccount, TrackerError and the TicketClient protocol.
jira_issues     Jira REST operations (search by label, create, users, watchers, comments).
github_issues   GitHub Issues operations via PyGithub.
"""
