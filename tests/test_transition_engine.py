from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

import pytest

from bobox.domain.models import Unit, UnitKind, UnitStatus
from bobox.domain.outcomes import RejectionKind, TransitionResult
from bobox.repository.unit_repository import UnitRepository
from bobox.services.transition_service import TransitionEngine


def _build_engine(clock=None) -> TransitionEngine:
    return TransitionEngine(repository=UnitRepository(clock=clock))


def _occupied_unit(engine: TransitionEngine, name: str = "Capsule-A02") -> Unit:
    unit = engine.repository.create(name, UnitKind.CAPSULE)
    result = engine.request_transition(unit.unit_id, UnitStatus.OCCUPIED)
    assert result.accepted
    return result.unit


def test_occupied_to_available_is_rejected() -> None:
    engine = _build_engine()
    unit = _occupied_unit(engine)

    result = engine.request_transition(unit.unit_id, UnitStatus.AVAILABLE)

    assert not result.accepted
    assert result.unit is None
    assert result.rejection.kind == RejectionKind.ILLEGAL_TRANSITION
    assert result.rejection.current == UnitStatus.OCCUPIED
    assert result.rejection.target == UnitStatus.AVAILABLE
    assert "Cleaning In Progress" in result.rejection.reason
    assert "Maintenance Needed" in result.rejection.reason
    assert engine.repository.get_by_id(unit.unit_id).status == UnitStatus.OCCUPIED


def test_occupied_to_cleaning_then_available_is_accepted() -> None:
    engine = _build_engine()
    unit = _occupied_unit(engine)

    cleaning = engine.request_transition(unit.unit_id, UnitStatus.CLEANING_IN_PROGRESS)
    assert cleaning.accepted
    assert cleaning.unit.status == UnitStatus.CLEANING_IN_PROGRESS

    available = engine.request_transition(unit.unit_id, UnitStatus.AVAILABLE)
    assert available.accepted
    assert available.unit.status == UnitStatus.AVAILABLE
    assert engine.repository.get_by_id(unit.unit_id) == available.unit


def test_occupied_to_maintenance_then_available_is_accepted() -> None:
    engine = _build_engine()
    unit = _occupied_unit(engine)

    assert engine.request_transition(unit.unit_id, UnitStatus.MAINTENANCE_NEEDED).accepted
    assert engine.request_transition(unit.unit_id, UnitStatus.AVAILABLE).accepted


def test_unknown_unit_is_not_found() -> None:
    engine = _build_engine()

    result = engine.request_transition("no-such-unit", UnitStatus.OCCUPIED)

    assert not result.accepted
    assert result.rejection.kind == RejectionKind.NOT_FOUND
    assert result.rejection.unit_id == "no-such-unit"


def test_same_status_request_is_rejected() -> None:
    engine = _build_engine()
    unit = engine.repository.create("Capsule-A01", UnitKind.CAPSULE)

    result = engine.request_transition(unit.unit_id, UnitStatus.AVAILABLE)

    assert result.rejection.kind == RejectionKind.ILLEGAL_TRANSITION
    assert engine.repository.get_by_id(unit.unit_id).last_updated == unit.last_updated


def test_rejection_leaves_record_untouched() -> None:
    engine = _build_engine()
    unit = engine.repository.create("Capsule-A01", UnitKind.CAPSULE)
    before = engine.repository.get_by_id(unit.unit_id)

    engine.request_transition(unit.unit_id, UnitStatus.CLEANING_IN_PROGRESS)

    assert engine.repository.get_by_id(unit.unit_id) == before


def test_accepted_transition_keeps_identity_and_kind() -> None:
    engine = _build_engine()
    unit = engine.repository.create("Forest-Cabin-1", UnitKind.CABIN)

    updated = engine.request_transition(unit.unit_id, UnitStatus.OCCUPIED).unit

    assert updated.unit_id == unit.unit_id
    assert updated.name == unit.name
    assert updated.kind == UnitKind.CABIN


def test_last_updated_strictly_increases_with_frozen_clock() -> None:
    frozen = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    engine = _build_engine(clock=lambda: frozen)
    unit = engine.repository.create("Capsule-A01", UnitKind.CAPSULE)

    stamps = [unit.last_updated]
    for target in (
        UnitStatus.OCCUPIED,
        UnitStatus.CLEANING_IN_PROGRESS,
        UnitStatus.MAINTENANCE_NEEDED,
        UnitStatus.AVAILABLE,
    ):
        stamps.append(engine.request_transition(unit.unit_id, target).unit.last_updated)

    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


def test_random_walk_never_leaves_status_set_or_skips_cleaning() -> None:
    engine = _build_engine()
    unit = engine.repository.create("Capsule-A01", UnitKind.CAPSULE)
    targets = list(UnitStatus) * 10

    for target in targets:
        before = engine.repository.get_by_id(unit.unit_id).status
        result = engine.request_transition(unit.unit_id, target)
        after = engine.repository.get_by_id(unit.unit_id).status
        assert after in set(UnitStatus)
        if result.accepted and target == UnitStatus.AVAILABLE:
            assert before in {UnitStatus.CLEANING_IN_PROGRESS, UnitStatus.MAINTENANCE_NEEDED}
        if before == UnitStatus.OCCUPIED:
            assert after != UnitStatus.AVAILABLE


def test_legal_next_states_exposed_by_engine() -> None:
    assert TransitionEngine.legal_next_states(UnitStatus.MAINTENANCE_NEEDED) == frozenset(
        {UnitStatus.AVAILABLE}
    )


def test_transition_result_requires_exactly_one_outcome() -> None:
    with pytest.raises(ValueError):
        TransitionResult()


# --- Concurrency ---

def test_concurrent_requests_for_same_unit_apply_once() -> None:
    def slow_clock() -> datetime:
        # Widen the read-check-write window so unserialized writers would overlap.
        time.sleep(0.01)
        return datetime.now(timezone.utc)

    engine = _build_engine(clock=slow_clock)
    unit = _occupied_unit(engine)
    workers = 8
    barrier = threading.Barrier(workers)
    results: list[TransitionResult] = []
    results_lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        result = engine.request_transition(unit.unit_id, UnitStatus.CLEANING_IN_PROGRESS)
        with results_lock:
            results.append(result)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    accepted = [result for result in results if result.accepted]
    rejected = [result for result in results if not result.accepted]
    assert len(results) == workers
    assert len(accepted) == 1
    assert all(r.rejection.current == UnitStatus.CLEANING_IN_PROGRESS for r in rejected)


def test_concurrent_cleaning_and_available_never_skip_cleaning() -> None:
    engine = _build_engine()
    for _ in range(25):
        unit = _occupied_unit(engine)
        barrier = threading.Barrier(2)
        outcomes: dict[UnitStatus, TransitionResult] = {}

        def request(target: UnitStatus) -> None:
            barrier.wait()
            outcomes[target] = engine.request_transition(unit.unit_id, target)

        threads = [
            threading.Thread(target=request, args=(UnitStatus.CLEANING_IN_PROGRESS,)),
            threading.Thread(target=request, args=(UnitStatus.AVAILABLE,)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        cleaning = outcomes[UnitStatus.CLEANING_IN_PROGRESS]
        available = outcomes[UnitStatus.AVAILABLE]
        assert cleaning.accepted
        if available.accepted:
            # Only legal when it observed the cleaning write first.
            assert available.unit.last_updated > cleaning.unit.last_updated
        else:
            assert available.rejection.current == UnitStatus.OCCUPIED


def test_lock_on_one_unit_does_not_block_another() -> None:
    engine = _build_engine()
    first = engine.repository.create("Capsule-A01", UnitKind.CAPSULE)
    second = engine.repository.create("Capsule-A02", UnitKind.CAPSULE)

    with engine.repository.unit_lock(first.unit_id):
        result = engine.request_transition(second.unit_id, UnitStatus.OCCUPIED)

    assert result.accepted
