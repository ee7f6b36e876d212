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


"""Identity key derivation.

The identity key is both the deduplication lookup label and a visible
label on the ticket. It depends only on the package, the manifest
directory and the fix state of the alert:

    lodash:4.17.21                     manifest at the repository root
    lodash:frontend/app:4.17.21        manifest in a sub-directory
    lodash:GHSA-xxxx-xxxx-xxxx         no patched version published yet

When no patched version exists the advisory id stands in. Publishing a
fix later therefore changes the key, and the changed situation gets a
fresh ticket.
"""

from __future__ import annotations

import posixpath
import re

from ticketing.common import normalize_path

from .models import AlertRecord

ROOT_MANIFEST_PATH = "."

_WHITESPACE_RE = re.compile(r"\s")


def is_root_manifest_path(path: str | None) -> bool:
    return normalize_path(path) in {"", ROOT_MANIFEST_PATH}


def manifest_dir(manifest_file: str | None) -> str:
    """Directory part of a manifest file path, ``"."`` for the repo root."""
    directory = posixpath.dirname(normalize_path(manifest_file))
    return directory or ROOT_MANIFEST_PATH


def build_identity_key(package: str, manifest_path: str | None, identifier: str) -> str:
    if is_root_manifest_path(manifest_path):
        key = f"{package}:{identifier}"
    else:
        key = f"{package}:{normalize_path(manifest_path)}:{identifier}"
    return _WHITESPACE_RE.sub("_", key)


def identity_key(alert: AlertRecord) -> str:
    identifier = alert.safe_version or alert.advisory_id
    return build_identity_key(alert.package, alert.manifest_path, identifier)
