"""Application service backing the unit HTTP endpoints."""

from __future__ import annotations

from typing import Optional

from bobox.domain.models import Unit, UnitKind, UnitStatus
from bobox.domain.outcomes import Rejection, RejectionKind
from bobox.domain.transitions import LEGAL_TRANSITIONS, ordered_next_states
from bobox.repository.unit_repository import UnitRepository
from bobox.services.transition_service import TransitionEngine


class UnitServiceError(Exception):
    """Base exception for unit workflow failures."""


class UnitValidationError(UnitServiceError):
    """Raised when create input is invalid."""


class UnitNotFoundError(UnitServiceError):
    """Raised when a unit id does not exist in the store."""


class IllegalTransitionError(UnitServiceError):
    """Raised when the requested status is not reachable from the current one."""

    def __init__(self, rejection: Rejection) -> None:
        super().__init__(rejection.reason)
        self.rejection = rejection


class UnitService:
    """Turns typed engine outcomes into exceptions the controllers map to HTTP."""

    def __init__(
        self,
        repository: Optional[UnitRepository] = None,
        engine: Optional[TransitionEngine] = None,
    ) -> None:
        if engine is None:
            engine = TransitionEngine(repository=repository or UnitRepository())
        elif repository is not None and engine.repository is not repository:
            raise ValueError("UnitService and its TransitionEngine must share one UnitRepository")
        self._engine = engine
        self._repository = engine.repository

    def create_unit(self, name: str, kind: UnitKind) -> Unit:
        try:
            return self._repository.create(name, kind)
        except ValueError as exc:
            raise UnitValidationError(str(exc)) from exc

    def get_unit(self, unit_id: str) -> Unit:
        unit = self._repository.get_by_id(unit_id)
        if unit is None:
            raise UnitNotFoundError("Unit not found")
        return unit

    def list_units(self, status_filter: Optional[UnitStatus] = None) -> list[Unit]:
        return self._repository.list_units(status_filter)

    def update_status(self, unit_id: str, target: UnitStatus) -> Unit:
        result = self._engine.request_transition(unit_id, target)
        if result.unit is not None:
            return result.unit
        rejection = result.rejection
        if rejection.kind == RejectionKind.NOT_FOUND:
            raise UnitNotFoundError(rejection.reason)
        raise IllegalTransitionError(rejection)

    def legal_next_states(self, status: UnitStatus) -> list[UnitStatus]:
        return ordered_next_states(status)

    def transition_table(self) -> dict[str, list[str]]:
        return {
            status.value: [target.value for target in ordered_next_states(status)]
            for status in LEGAL_TRANSITIONS
        }
