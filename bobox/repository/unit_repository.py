"""In-memory repository that owns the canonical unit records."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from threading import Lock, RLock
from typing import Callable, Dict, List, Optional

from bobox.domain.constraints import validate_unit_kind, validate_unit_name
from bobox.domain.models import Unit, UnitKind, UnitStatus
from bobox.domain.transitions import INITIAL_STATUS
from bobox.utils.logger import get_logger


logger = get_logger(__name__)

Clock = Callable[[], datetime]

_MIN_TICK = timedelta(microseconds=1)

SAMPLE_UNITS: tuple[tuple[str, UnitKind, UnitStatus], ...] = (
    ("Capsule-A01", UnitKind.CAPSULE, UnitStatus.AVAILABLE),
    ("Capsule-A02", UnitKind.CAPSULE, UnitStatus.OCCUPIED),
    ("Forest-Cabin-1", UnitKind.CABIN, UnitStatus.AVAILABLE),
    ("Forest-Cabin-2", UnitKind.CABIN, UnitStatus.CLEANING_IN_PROGRESS),
    ("Capsule-B01", UnitKind.CAPSULE, UnitStatus.MAINTENANCE_NEEDED),
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UnitRepository:
    """Process-lifetime unit store.

    The collection lock guards the dicts and is held only for single dict
    operations. Status changes are serialized per unit through ``unit_lock``;
    a caller that reads, checks and writes a record must hold that unit's
    lock for the whole sequence.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or _utc_now
        self._units: Dict[str, Unit] = {}
        self._unit_locks: Dict[str, Lock] = {}
        self._lock = RLock()

    def next_timestamp(self, previous: Optional[datetime] = None) -> datetime:
        """Return the current time, or one microsecond past ``previous`` if later."""
        now = self._clock()
        if previous is not None and now <= previous:
            return previous + _MIN_TICK
        return now

    def _insert(self, name: str, kind: UnitKind, status: UnitStatus) -> Unit:
        with self._lock:
            unit_id = str(uuid.uuid4())
            while unit_id in self._units:
                unit_id = str(uuid.uuid4())
            unit = Unit(
                unit_id=unit_id,
                name=name,
                kind=kind,
                status=status,
                last_updated=self.next_timestamp(),
            )
            self._units[unit_id] = unit
            self._unit_locks[unit_id] = Lock()
        return unit

    def create(self, name: str, kind: UnitKind) -> Unit:
        unit = self._insert(validate_unit_name(name), validate_unit_kind(kind), INITIAL_STATUS)
        logger.info("Created unit %s (%s, %s)", unit.unit_id, unit.name, unit.kind.value)
        return unit

    def get_by_id(self, unit_id: str) -> Optional[Unit]:
        with self._lock:
            return self._units.get(unit_id)

    def list_units(self, status_filter: Optional[UnitStatus] = None) -> List[Unit]:
        """Snapshot of units in insertion order, optionally filtered by status."""
        with self._lock:
            units = list(self._units.values())
        if status_filter is None:
            return units
        return [unit for unit in units if unit.status == status_filter]

    def count_units(self) -> int:
        with self._lock:
            return len(self._units)

    def unit_lock(self, unit_id: str) -> Optional[Lock]:
        """Per-unit lock, or None when the unit does not exist."""
        with self._lock:
            return self._unit_locks.get(unit_id)

    def replace(self, unit: Unit) -> None:
        """Swap the stored record. Only the transition engine calls this."""
        with self._lock:
            if unit.unit_id not in self._units:
                raise KeyError(unit.unit_id)
            self._units[unit.unit_id] = unit

    def seed_sample_units(self) -> int:
        """Seed demo units only when the store is empty. Returns rows added."""
        with self._lock:
            if self._units:
                logger.info("Units already present; skipping sample seed")
                return 0
            for name, kind, status in SAMPLE_UNITS:
                self._insert(name, kind, status)
        logger.info("Seeded %d sample units", len(SAMPLE_UNITS))
        return len(SAMPLE_UNITS)
