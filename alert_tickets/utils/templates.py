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


"""Ticket body and watcher comment templates.

Jira bodies use wiki markup; the description goes into a ``{noformat}``
block so markup embedded in advisory text is shown literally. The
Markdown flavour is used by the GitHub Issues backend.
"""

JIRA_BODY_TEMPLATE = """- Repository: [{{ repo }}|{{ repo_url }}]
- Package: {{ package }} ({{ ecosystem }})
- Vulnerable version: {{ vulnerable_range }}
- Secure version: {{ safe_version }}
{{ links_section }}
{noformat}
{{ description }}
{noformat}
"""

JIRA_LINKS_TEMPLATE = """
- Links:
{{ links }}
"""

MARKDOWN_BODY_TEMPLATE = """- **Repository:** [{{ repo }}]({{ repo_url }})
- **Package:** {{ package }} ({{ ecosystem }})
- **Vulnerable version:** {{ vulnerable_range }}
- **Secure version:** {{ safe_version }}
{{ links_section }}
{{ fence }}text
{{ description }}
{{ fence }}
"""

MARKDOWN_LINKS_TEMPLATE = """
- **Links:**
{{ links }}
"""

JIRA_LINK_BULLET = "-- "
MARKDOWN_LINK_BULLET = "  - "


WATCHERS_TEXT = "The following users have been added as watchers: {{ watchers }}."
NO_WATCHERS_TEXT = "No watchers have been added to this issue."
NOT_FOUND_WATCHERS_TEXT = "Could not find tracker accounts for the following watchers: {{ watchers }}."
