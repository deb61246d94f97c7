"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from bobox.services.unit_service import UnitService


def get_unit_service(request: Request) -> UnitService:
    service = getattr(request.app.state, "unit_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unit service is not initialized",
        )
    return service
