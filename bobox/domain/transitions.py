"""Unit status state machine.

``LEGAL_TRANSITIONS`` is the single source of truth for which status changes
are allowed. Every helper in this module, and every collaborator that wants
to present valid choices, derives its answer from that table.
"""

from __future__ import annotations

from typing import Mapping

from bobox.domain.models import UnitStatus


LEGAL_TRANSITIONS: Mapping[UnitStatus, frozenset[UnitStatus]] = {
    UnitStatus.AVAILABLE: frozenset(
        {UnitStatus.OCCUPIED, UnitStatus.MAINTENANCE_NEEDED}
    ),
    UnitStatus.OCCUPIED: frozenset(
        {UnitStatus.CLEANING_IN_PROGRESS, UnitStatus.MAINTENANCE_NEEDED}
    ),
    UnitStatus.CLEANING_IN_PROGRESS: frozenset(
        {UnitStatus.AVAILABLE, UnitStatus.MAINTENANCE_NEEDED}
    ),
    UnitStatus.MAINTENANCE_NEEDED: frozenset({UnitStatus.AVAILABLE}),
}

INITIAL_STATUS = UnitStatus.AVAILABLE

# Declaration order of UnitStatus, used to keep API output stable.
_STATUS_ORDER = {status: index for index, status in enumerate(UnitStatus)}


def validate_transition_table(
    table: Mapping[UnitStatus, frozenset[UnitStatus]],
) -> None:
    missing = [status.value for status in UnitStatus if status not in table]
    if missing:
        raise ValueError(
            "transition table has no row for: " + ", ".join(missing)
        )
    for current, targets in table.items():
        if not isinstance(current, UnitStatus):
            raise ValueError(f"unknown status in transition table: {current!r}")
        for target in targets:
            if not isinstance(target, UnitStatus):
                raise ValueError(
                    f"unknown target {target!r} for status {current.value}"
                )


validate_transition_table(LEGAL_TRANSITIONS)


def legal_next_states(current: UnitStatus) -> frozenset[UnitStatus]:
    return LEGAL_TRANSITIONS[current]


def ordered_next_states(current: UnitStatus) -> list[UnitStatus]:
    """Legal next states sorted in UnitStatus declaration order."""
    return sorted(legal_next_states(current), key=_STATUS_ORDER.__getitem__)


def is_legal_transition(current: UnitStatus, target: UnitStatus) -> bool:
    return target in LEGAL_TRANSITIONS[current]


def describe_illegal_transition(current: UnitStatus, target: UnitStatus) -> str:
    """Human-readable rejection reason naming the statuses that are reachable."""
    if current == UnitStatus.OCCUPIED and target == UnitStatus.AVAILABLE:
        intermediates = [
            status.value
            for status in ordered_next_states(current)
            if is_legal_transition(status, target)
        ]
        return (
            f"Cannot change status directly from {current.value} to {target.value}. "
            f"Unit must first be set to {' or '.join(intermediates)}."
        )
    if current == target:
        return f"Unit is already {current.value}."
    allowed = ", ".join(status.value for status in ordered_next_states(current))
    return (
        f"Cannot change status from {current.value} to {target.value}. "
        f"Allowed next statuses: {allowed}."
    )
