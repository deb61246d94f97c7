"""Typed results returned by the transition engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bobox.domain.models import Unit, UnitStatus


class RejectionKind(str, Enum):
    NOT_FOUND = "NotFound"
    ILLEGAL_TRANSITION = "IllegalTransition"


@dataclass(frozen=True)
class Rejection:
    kind: RejectionKind
    reason: str
    unit_id: str
    target: UnitStatus
    current: Optional[UnitStatus] = None


@dataclass(frozen=True)
class TransitionResult:
    """Exactly one of ``unit`` or ``rejection`` is set."""

    unit: Optional[Unit] = None
    rejection: Optional[Rejection] = None

    def __post_init__(self) -> None:
        if (self.unit is None) == (self.rejection is None):
            raise ValueError("TransitionResult needs exactly one of unit or rejection")

    @property
    def accepted(self) -> bool:
        return self.unit is not None

    @classmethod
    def success(cls, unit: Unit) -> "TransitionResult":
        return cls(unit=unit)

    @classmethod
    def not_found(cls, unit_id: str, target: UnitStatus) -> "TransitionResult":
        return cls(
            rejection=Rejection(
                kind=RejectionKind.NOT_FOUND,
                reason="Unit not found",
                unit_id=unit_id,
                target=target,
            )
        )

    @classmethod
    def illegal(
        cls,
        unit_id: str,
        current: UnitStatus,
        target: UnitStatus,
        reason: str,
    ) -> "TransitionResult":
        return cls(
            rejection=Rejection(
                kind=RejectionKind.ILLEGAL_TRANSITION,
                reason=reason,
                unit_id=unit_id,
                target=target,
                current=current,
            )
        )
