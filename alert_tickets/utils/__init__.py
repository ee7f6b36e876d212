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


"""Security alert ticket promotion utilities.

Modules
-------
models          Core dataclass definitions (AlertRecord, WatcherReport, SyncResult).
errors          Exceptions raised by the ensure workflow.
alert_parser    Alert JSON extraction and alerts-file loading.
identity        Identity key derivation (the deduplication label).
severity        Alert severity vocabulary and its tracker value mapping.
templates       Ticket body and watcher comment templates.
issue_builder   Ticket title / body / labels / custom fields construction.
watchers        Watcher resolution and summary comment composition.
config          Validated AppConfig built from CLI args and environment.
issue_sync      Existence check, TicketEnsurer and batch sync orchestration.
"""
