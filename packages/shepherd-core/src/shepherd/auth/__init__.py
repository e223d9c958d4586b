"""Session state, backend user reconciliation, and route gating."""

from __future__ import annotations

from shepherd.auth.guard import GateDecision, GateResult, gate, is_gated_path, is_protected
from shepherd.auth.session import IdentityProvider, Session, StaticIdentityProvider
from shepherd.auth.sync import SessionSync, SyncState

__all__ = [
    "GateDecision",
    "GateResult",
    "IdentityProvider",
    "Session",
    "SessionSync",
    "StaticIdentityProvider",
    "SyncState",
    "gate",
    "is_gated_path",
    "is_protected",
]
