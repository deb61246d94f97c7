"""Domain-level validation rules for unit records."""

from __future__ import annotations

from bobox.domain.models import UnitKind


def validate_unit_name(name: str) -> str:
    """Return the stripped name or raise ValueError when it is blank."""
    if not isinstance(name, str):
        raise ValueError("name must be a string")
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("name must be non-empty")
    return cleaned


def validate_unit_kind(kind: UnitKind) -> UnitKind:
    if not isinstance(kind, UnitKind):
        raise ValueError(
            "kind must be one of: " + ", ".join(item.value for item in UnitKind)
        )
    return kind
