#!/usr/bin/env python3
"""Validate local Bobox environment readiness."""

from __future__ import annotations

import importlib
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bobox.domain.models import UnitKind, UnitStatus
from bobox.domain.outcomes import RejectionKind
from bobox.repository.unit_repository import SAMPLE_UNITS, UnitRepository
from bobox.services.transition_service import TransitionEngine

SEPARATOR_LINE = "=" * 44

PACKAGE_SPECS = [
    ("fastapi", "fastapi"),
    ("uvicorn", "uvicorn"),
    ("pydantic", "pydantic"),
    ("pandas", "pandas"),
    ("requests", "requests"),
    ("streamlit", "streamlit"),
    ("httpx", "httpx"),
    ("pytest", "pytest"),
]


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def _check_packages() -> tuple[bool, str]:
    import_errors: list[str] = []
    for module_name, dist_name in PACKAGE_SPECS:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        return _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    return _print_result("Required packages: all importable", True)


def _check_lifecycle() -> tuple[bool, str]:
    engine = TransitionEngine(repository=UnitRepository())
    unit = engine.repository.create("Validation-Capsule", UnitKind.CAPSULE)
    steps = [
        (UnitStatus.OCCUPIED, True),
        (UnitStatus.AVAILABLE, False),
        (UnitStatus.CLEANING_IN_PROGRESS, True),
        (UnitStatus.AVAILABLE, True),
    ]
    for target, expected in steps:
        result = engine.request_transition(unit.unit_id, target)
        if result.accepted != expected:
            raise RuntimeError(f"unexpected outcome for -> {target.value}")
    missing = engine.request_transition("missing-unit", UnitStatus.OCCUPIED)
    if missing.rejection is None or missing.rejection.kind != RejectionKind.NOT_FOUND:
        raise RuntimeError("unknown unit id was not rejected as NotFound")
    return _print_result("Unit lifecycle smoke run", True)


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    ok, line = _check_packages()
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 3: Sample seeding
    try:
        seeded = UnitRepository().seed_sample_units()
        if seeded != len(SAMPLE_UNITS):
            raise RuntimeError(f"expected {len(SAMPLE_UNITS)} units, got {seeded}")
        ok, line = _print_result("Sample units", True, f": {seeded} seeded")
    except RuntimeError as exc:
        ok, line = _print_result("Sample units", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4: Transition rules
    try:
        ok, line = _check_lifecycle()
    except RuntimeError as exc:
        ok, line = _print_result("Unit lifecycle smoke run", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Bobox Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
