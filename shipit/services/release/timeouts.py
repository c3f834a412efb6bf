from __future__ import annotations

# Local git operations (diff-index, status, add, commit, tag, reset)
GIT_TIMEOUT_SECONDS = 30.0

# Network-bound git operations (fetch, push, clone)
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# Hosting-service release API
HOSTING_TIMEOUT_SECONDS = 30.0
