"""Type-ahead member look-up."""

from __future__ import annotations

from shepherd.search.incremental import MemberSearch, MemberSearchBackend

__all__ = ["MemberSearch", "MemberSearchBackend"]
