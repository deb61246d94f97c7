"""HTTP controller layer for unit lifecycle endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from bobox.controllers.dependencies import get_unit_service
from bobox.domain.models import Unit, UnitKind, UnitStatus
from bobox.services.unit_service import (
    IllegalTransitionError,
    UnitNotFoundError,
    UnitService,
    UnitValidationError,
)
from bobox.utils.logger import get_logger


logger = get_logger(__name__)

# Mounted by create_app under the configured API prefix.
router = APIRouter(tags=["units"])
transitions_router = APIRouter(tags=["transitions"])
health_router = APIRouter(tags=["health"])


class UnitResponse(BaseModel):
    """Wire shape of a unit, keyed the way the dashboard client expects."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    type: UnitKind
    status: UnitStatus
    last_updated: datetime = Field(alias="lastUpdated")

    @classmethod
    def from_unit(cls, unit: Unit) -> "UnitResponse":
        return cls(
            id=unit.unit_id,
            name=unit.name,
            type=unit.kind,
            status=unit.status,
            last_updated=unit.last_updated,
        )


class CreateUnitRequest(BaseModel):
    name: str = Field(min_length=1)
    type: UnitKind

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must be non-empty")
        return value


class UpdateUnitStatusRequest(BaseModel):
    status: UnitStatus


class LegalTransitionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: UnitStatus
    legal_next_states: list[UnitStatus] = Field(alias="legalNextStates")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: datetime


@health_router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
def health(request: Request) -> HealthResponse:
    return HealthResponse(
        status="ok",
        service=request.app.title,
        version=request.app.version,
        timestamp=datetime.now(timezone.utc),
    )


def _parse_status_filter(raw: Optional[str]) -> Optional[UnitStatus]:
    """An absent or empty ``status`` query value means no filter."""
    if not raw:
        return None
    try:
        return UnitStatus(raw)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in UnitStatus)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid status '{raw}'. Expected one of: {allowed}",
        ) from exc


@router.get("", response_model=list[UnitResponse], status_code=status.HTTP_200_OK)
def list_units(
    status_param: Optional[str] = Query(default=None, alias="status"),
    service: UnitService = Depends(get_unit_service),
) -> list[UnitResponse]:
    """List units in insertion order, optionally only those with one status."""
    status_filter = _parse_status_filter(status_param)
    try:
        return [UnitResponse.from_unit(unit) for unit in service.list_units(status_filter)]
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected unit listing failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list units",
        ) from exc


@router.get("/{unit_id}", response_model=UnitResponse, status_code=status.HTTP_200_OK)
def get_unit(
    unit_id: str,
    service: UnitService = Depends(get_unit_service),
) -> UnitResponse:
    try:
        return UnitResponse.from_unit(service.get_unit(unit_id))
    except UnitNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected unit lookup failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch unit",
        ) from exc


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(
    payload: CreateUnitRequest,
    service: UnitService = Depends(get_unit_service),
) -> UnitResponse:
    """New units always start as Available."""
    try:
        return UnitResponse.from_unit(service.create_unit(payload.name, payload.type))
    except UnitValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected unit creation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create unit",
        ) from exc


@router.put("/{unit_id}", response_model=UnitResponse, status_code=status.HTTP_200_OK)
def update_unit_status(
    unit_id: str,
    payload: UpdateUnitStatusRequest,
    service: UnitService = Depends(get_unit_service),
) -> UnitResponse:
    try:
        return UnitResponse.from_unit(service.update_status(unit_id, payload.status))
    except UnitNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except IllegalTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected unit status update failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update unit status",
        ) from exc


@router.get(
    "/{unit_id}/transitions",
    response_model=LegalTransitionsResponse,
    status_code=status.HTTP_200_OK,
)
def get_unit_transitions(
    unit_id: str,
    service: UnitService = Depends(get_unit_service),
) -> LegalTransitionsResponse:
    try:
        unit = service.get_unit(unit_id)
        return LegalTransitionsResponse(
            id=unit.unit_id,
            status=unit.status,
            legal_next_states=service.legal_next_states(unit.status),
        )
    except UnitNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@transitions_router.get("/transitions", status_code=status.HTTP_200_OK)
def get_transition_table(
    service: UnitService = Depends(get_unit_service),
) -> dict[str, list[str]]:
    return service.transition_table()
