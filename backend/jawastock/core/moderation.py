"""Moderation State Machine: asset status transitions.

Invariants:
    - PENDING is the only source state: PENDING -> APPROVED | REJECTED
    - APPROVED and REJECTED are terminal (no resubmission transition exists)
    - Under STRICT policy every other (current, target) pair raises
      InvalidTransitionError, including same-state "transitions"
    - Under OVERWRITE policy any valid status is accepted as-is
    - Who may trigger a transition is NOT decided here (see access_policy)

Design Decisions:
    - Transition table as data (dict of sets) so the machine is total and
      enumerable in tests
    - OVERWRITE kept as an explicit policy instead of a silent default: the
      permissive behavior stays available but must be opted into
"""

from jawastock.core.domain_types import AssetStatus, ModerationPolicy
from jawastock.core.errors import InvalidTransitionError

TRANSITIONS: dict[AssetStatus, frozenset[AssetStatus]] = {
    AssetStatus.PENDING: frozenset({AssetStatus.APPROVED, AssetStatus.REJECTED}),
    AssetStatus.APPROVED: frozenset(),
    AssetStatus.REJECTED: frozenset(),
}

TERMINAL_STATES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)


def can_transition(current: AssetStatus, target: AssetStatus) -> bool:
    return target in TRANSITIONS[AssetStatus(current)]


def check_transition(
    current: AssetStatus,
    target: AssetStatus,
    policy: ModerationPolicy = ModerationPolicy.STRICT,
) -> AssetStatus:
    """Return the status to store, or raise InvalidTransitionError."""
    current = AssetStatus(current)
    target = AssetStatus(target)
    if policy == ModerationPolicy.OVERWRITE:
        return target
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)
    return target
