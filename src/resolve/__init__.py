"""Resolution of call sites against the snapshot store."""

from resolve.models import AnchorRange, Decision, DecisionKind, Insertion
from resolve.resolver import analyze, resolve_call, resolve_calls

__all__ = [
    "AnchorRange",
    "Decision",
    "DecisionKind",
    "Insertion",
    "analyze",
    "resolve_call",
    "resolve_calls",
]
