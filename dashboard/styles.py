"""Display lookup tables and form rules for the operator dashboard."""

from __future__ import annotations

import re

GRAY = "#6b7280"

STATUS_COLORS: dict[str, str] = {
    "Available": "#10b981",
    "Occupied": "#ef4444",
    "Cleaning In Progress": "#f59e0b",
    "Maintenance Needed": GRAY,
}

KIND_COLORS: dict[str, str] = {
    "capsule": "#3b82f6",
    "cabin": "#10b981",
}

KIND_LABELS: dict[str, str] = {
    "capsule": "Capsule",
    "cabin": "Cabin",
}

STATUS_ORDER: tuple[str, ...] = tuple(STATUS_COLORS)

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9\-_ ]+$")
MIN_NAME_LENGTH = 3


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, GRAY)


def kind_color(kind: str) -> str:
    return KIND_COLORS.get(kind, GRAY)


def kind_label(kind: str) -> str:
    return KIND_LABELS.get(kind, kind)


def status_cell_css(status: str) -> str:
    return f"background-color: {status_color(status)}; color: white"


def kind_cell_css(kind: str) -> str:
    return f"background-color: {kind_color(kind)}; color: white"


def validate_unit_form(name: str, kind: str | None) -> dict[str, str]:
    """Return field -> message for every problem in the add-unit form."""
    errors: dict[str, str] = {}
    cleaned = (name or "").strip()
    if not cleaned:
        errors["name"] = "Unit name is required"
    elif len(cleaned) < MIN_NAME_LENGTH:
        errors["name"] = f"Unit name must be at least {MIN_NAME_LENGTH} characters"
    elif not _NAME_PATTERN.match(cleaned):
        errors["name"] = (
            "Unit name can only contain letters, numbers, hyphens, underscores, and spaces"
        )
    if kind not in KIND_LABELS:
        errors["type"] = "Please select a valid unit type"
    return errors
