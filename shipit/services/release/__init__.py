"""Release pipeline.

- semver: version resolution
- repo_identity: owner/repo parsing for the hosting API
- executor: required/guarded command execution
- changelog, hosting, mirror: optional pipeline collaborators
- orchestrator: the release state machine
"""

from __future__ import annotations
