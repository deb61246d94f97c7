"""Domain models for lodging units and their lifecycle status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UnitKind(str, Enum):
    CAPSULE = "capsule"
    CABIN = "cabin"


class UnitStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    CLEANING_IN_PROGRESS = "Cleaning In Progress"
    MAINTENANCE_NEEDED = "Maintenance Needed"


@dataclass(frozen=True)
class Unit:
    """Canonical unit record. Frozen so callers cannot mutate store state."""

    unit_id: str
    name: str
    kind: UnitKind
    status: UnitStatus
    last_updated: datetime

