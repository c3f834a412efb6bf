"""Git output parsing."""

from shipit.git.repository import GitStatus, StatusEntry, parse_status

__all__ = ["GitStatus", "StatusEntry", "parse_status"]
