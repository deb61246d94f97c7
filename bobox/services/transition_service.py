"""Transition engine: sole authority for changing a unit's status."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from bobox.domain.models import UnitStatus
from bobox.domain.outcomes import TransitionResult
from bobox.domain.transitions import (
    describe_illegal_transition,
    is_legal_transition,
    legal_next_states,
)
from bobox.repository.unit_repository import UnitRepository
from bobox.utils.logger import get_logger


logger = get_logger(__name__)


class TransitionEngine:
    """Checks proposed status changes against the transition table and applies them.

    Read, check and write for one unit happen under that unit's lock, so two
    concurrent requests for the same unit never both act on the same current
    status. Requests for different units do not block each other.
    """

    def __init__(self, repository: Optional[UnitRepository] = None) -> None:
        self._repository = repository or UnitRepository()

    @property
    def repository(self) -> UnitRepository:
        return self._repository

    @staticmethod
    def legal_next_states(current: UnitStatus) -> frozenset[UnitStatus]:
        return legal_next_states(current)

    def request_transition(self, unit_id: str, target: UnitStatus) -> TransitionResult:
        unit_lock = self._repository.unit_lock(unit_id)
        if unit_lock is None:
            logger.info("Transition rejected: unit %s not found", unit_id)
            return TransitionResult.not_found(unit_id, target)

        with unit_lock:
            current_unit = self._repository.get_by_id(unit_id)
            if current_unit is None:
                return TransitionResult.not_found(unit_id, target)

            current = current_unit.status
            if not is_legal_transition(current, target):
                reason = describe_illegal_transition(current, target)
                logger.info("Transition rejected for unit %s: %s", unit_id, reason)
                return TransitionResult.illegal(unit_id, current, target, reason)

            updated = replace(
                current_unit,
                status=target,
                last_updated=self._repository.next_timestamp(current_unit.last_updated),
            )
            self._repository.replace(updated)

        logger.info(
            "Unit %s transitioned %s -> %s",
            unit_id,
            current.value,
            target.value,
        )
        return TransitionResult.success(updated)
