"""Tests for the unit status transition table and its helpers."""

from __future__ import annotations

import pytest

from bobox.domain.models import UnitStatus
from bobox.domain.transitions import (
    INITIAL_STATUS,
    LEGAL_TRANSITIONS,
    describe_illegal_transition,
    is_legal_transition,
    legal_next_states,
    ordered_next_states,
    validate_transition_table,
)


EXPECTED_TABLE = {
    UnitStatus.AVAILABLE: {UnitStatus.OCCUPIED, UnitStatus.MAINTENANCE_NEEDED},
    UnitStatus.OCCUPIED: {UnitStatus.CLEANING_IN_PROGRESS, UnitStatus.MAINTENANCE_NEEDED},
    UnitStatus.CLEANING_IN_PROGRESS: {UnitStatus.AVAILABLE, UnitStatus.MAINTENANCE_NEEDED},
    UnitStatus.MAINTENANCE_NEEDED: {UnitStatus.AVAILABLE},
}


@pytest.mark.parametrize("status", list(UnitStatus))
def test_legal_next_states_matches_table(status: UnitStatus) -> None:
    assert legal_next_states(status) == EXPECTED_TABLE[status]


def test_table_has_a_row_for_every_status() -> None:
    assert set(LEGAL_TRANSITIONS) == set(UnitStatus)


def test_initial_status_is_available() -> None:
    assert INITIAL_STATUS == UnitStatus.AVAILABLE


@pytest.mark.parametrize("current", list(UnitStatus))
@pytest.mark.parametrize("target", list(UnitStatus))
def test_is_legal_transition_agrees_with_next_states(
    current: UnitStatus,
    target: UnitStatus,
) -> None:
    assert is_legal_transition(current, target) == (target in EXPECTED_TABLE[current])


def test_available_only_reachable_from_cleaning_or_maintenance() -> None:
    sources = {
        status for status in UnitStatus if is_legal_transition(status, UnitStatus.AVAILABLE)
    }
    assert sources == {UnitStatus.CLEANING_IN_PROGRESS, UnitStatus.MAINTENANCE_NEEDED}


@pytest.mark.parametrize("status", list(UnitStatus))
def test_same_status_is_never_a_legal_transition(status: UnitStatus) -> None:
    assert not is_legal_transition(status, status)


def test_ordered_next_states_follow_declaration_order() -> None:
    assert ordered_next_states(UnitStatus.OCCUPIED) == [
        UnitStatus.CLEANING_IN_PROGRESS,
        UnitStatus.MAINTENANCE_NEEDED,
    ]
    assert ordered_next_states(UnitStatus.CLEANING_IN_PROGRESS) == [
        UnitStatus.AVAILABLE,
        UnitStatus.MAINTENANCE_NEEDED,
    ]


# --- Rejection reasons ---

def test_occupied_to_available_reason_names_intermediate_states() -> None:
    reason = describe_illegal_transition(UnitStatus.OCCUPIED, UnitStatus.AVAILABLE)
    assert reason == (
        "Cannot change status directly from Occupied to Available. "
        "Unit must first be set to Cleaning In Progress or Maintenance Needed."
    )


def test_other_illegal_reason_lists_allowed_targets() -> None:
    reason = describe_illegal_transition(
        UnitStatus.MAINTENANCE_NEEDED,
        UnitStatus.OCCUPIED,
    )
    assert "Maintenance Needed to Occupied" in reason
    assert "Allowed next statuses: Available." in reason


def test_same_status_reason() -> None:
    reason = describe_illegal_transition(UnitStatus.OCCUPIED, UnitStatus.OCCUPIED)
    assert reason == "Unit is already Occupied."


# --- Table validation ---

def test_validate_transition_table_accepts_current_table() -> None:
    validate_transition_table(LEGAL_TRANSITIONS)


def test_validate_transition_table_rejects_missing_row() -> None:
    table = dict(LEGAL_TRANSITIONS)
    del table[UnitStatus.MAINTENANCE_NEEDED]
    with pytest.raises(ValueError, match="Maintenance Needed"):
        validate_transition_table(table)


def test_validate_transition_table_rejects_unknown_target() -> None:
    table = dict(LEGAL_TRANSITIONS)
    table[UnitStatus.AVAILABLE] = frozenset({UnitStatus.OCCUPIED, "Checked Out"})
    with pytest.raises(ValueError, match="Checked Out"):
        validate_transition_table(table)
