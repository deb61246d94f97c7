"""Streamlit operator dashboard for the Bobox unit management API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

from bobox.utils.config import get_settings
from styles import (
    KIND_LABELS,
    STATUS_ORDER,
    kind_cell_css,
    kind_label,
    status_cell_css,
    validate_unit_form,
)

# ==========================================
# Configuration & Constants
# ==========================================
settings = get_settings()
API_BASE_URL = settings.dashboard_api_url.rstrip("/")
UNITS_URL = f"{API_BASE_URL}{settings.api_prefix}/units"
REQUEST_TIMEOUT_SECONDS = settings.dashboard_request_timeout_seconds

st.set_page_config(
    page_title="Bobox Units",
    page_icon="🛏️",
    layout="wide",
)


# ==========================================
# API Helper Functions
# ==========================================
def _error_detail(exc: requests.exceptions.RequestException) -> str:
    """Prefer the API's own rejection reason over the transport message."""
    response = getattr(exc, "response", None)
    if response is None:
        return "Cannot connect to server. Please ensure the backend is running."
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return "; ".join(str(item.get("msg", item)) for item in detail)
    if response.status_code >= 500:
        return "Server error. Please try again later."
    return str(exc)


def fetch_units(status_filter: Optional[str]) -> Optional[List[Dict[str, Any]]]:
    params = {"status": status_filter} if status_filter else None
    try:
        response = requests.get(UNITS_URL, params=params, timeout=REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Failed to fetch units: {_error_detail(e)}")
        return None


def fetch_legal_next_states(unit_id: str) -> List[str]:
    try:
        response = requests.get(
            f"{UNITS_URL}/{unit_id}/transitions",
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json().get("legalNextStates", [])
    except requests.exceptions.RequestException as e:
        st.error(f"Failed to load allowed statuses: {_error_detail(e)}")
        return []


def create_unit(name: str, kind: str) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(
            UNITS_URL,
            json={"name": name, "type": kind},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Failed to create unit: {_error_detail(e)}")
        return None


def update_unit_status(unit_id: str, new_status: str) -> Optional[Dict[str, Any]]:
    try:
        response = requests.put(
            f"{UNITS_URL}/{unit_id}",
            json={"status": new_status},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Failed to update status: {_error_detail(e)}")
        return None


# ==========================================
# UI Page Functions
# ==========================================
def render_status_summary(units: List[Dict[str, Any]]) -> None:
    counts = pd.Series([unit["status"] for unit in units], dtype="object").value_counts()
    columns = st.columns(len(STATUS_ORDER) + 1)
    columns[0].metric("Total Units", len(units))
    for column, status in zip(columns[1:], STATUS_ORDER):
        column.metric(status, int(counts.get(status, 0)))


def render_units_page() -> None:
    st.header("🛏️ Units")
    st.markdown("Track capsules and cabins through their housekeeping lifecycle.")

    col1, col2 = st.columns(2)
    with col1:
        status_choice = st.selectbox("Status", ["All", *STATUS_ORDER])
    with col2:
        kind_choice = st.selectbox(
            "Type",
            ["all", *KIND_LABELS],
            format_func=lambda value: "All" if value == "all" else kind_label(value),
        )

    units = fetch_units(None if status_choice == "All" else status_choice)
    if units is None:
        return
    if kind_choice != "all":
        units = [unit for unit in units if unit["type"] == kind_choice]

    render_status_summary(units)

    if not units:
        st.info("No units match the current filters.")
        return

    df = pd.DataFrame(units)
    df["lastUpdated"] = pd.to_datetime(df["lastUpdated"]).dt.strftime("%d/%m/%Y %H:%M")
    styled = (
        df[["name", "type", "status", "lastUpdated"]]
        .style.map(status_cell_css, subset=["status"])
        .map(kind_cell_css, subset=["type"])
        .format(kind_label, subset=["type"])
    )
    st.dataframe(styled, use_container_width=True, hide_index=True)

    st.write("### Change Status")
    units_by_id = {unit["id"]: unit for unit in units}
    unit_id = st.selectbox(
        "Unit",
        list(units_by_id),
        format_func=lambda value: f"{units_by_id[value]['name']} ({units_by_id[value]['status']})",
    )
    # Only statuses the transition table allows from the unit's current status.
    next_states = fetch_legal_next_states(unit_id)
    if not next_states:
        st.warning("This unit has no allowed status changes.")
        return
    new_status = st.selectbox("New Status", next_states)

    if st.button("Update Status", type="primary"):
        with st.spinner("Updating unit..."):
            updated = update_unit_status(unit_id, new_status)
            if updated:
                st.toast(f"{updated['name']} is now {updated['status']}.")
                st.rerun()


def render_add_unit_page() -> None:
    st.header("➕ Add Unit")
    st.markdown("New units always start as Available.")

    with st.form("add_unit", clear_on_submit=True):
        name = st.text_input("Unit Name", placeholder="e.g. Capsule-A03")
        kind = st.selectbox("Unit Type", list(KIND_LABELS), format_func=kind_label)
        submitted = st.form_submit_button("Add Unit", type="primary")

    if submitted:
        errors = validate_unit_form(name, kind)
        if errors:
            for message in errors.values():
                st.error(message)
            return
        created = create_unit(name.strip(), kind)
        if created:
            st.success(f"Created {created['name']} ({kind_label(created['type'])}).")


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    st.sidebar.title("Bobox Unit Management")
    st.sidebar.markdown("---")

    page = st.sidebar.radio("Navigation", ["Units", "Add Unit"])

    st.sidebar.markdown("---")
    st.sidebar.caption(f"API: {API_BASE_URL}")

    if page == "Units":
        render_units_page()
    elif page == "Add Unit":
        render_add_unit_page()


if __name__ == "__main__":
    main()
