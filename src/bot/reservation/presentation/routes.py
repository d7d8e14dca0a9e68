"""HTTP routes for reservations.

The acting lab member is identified by the ``X-Actor-Email`` header set by
the chat front end.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from infrastructure.dependencies import get_resource_config
from infrastructure.resource_config import ResourceConfig
from reservation.application.exceptions import ResourceConflictError
from reservation.application.services import ResourceUsageService
from reservation.dependencies import get_actor_email, get_resource_usage_service
from reservation.domain.exceptions import ForbiddenError, ResourceUsageError
from reservation.domain.value_objects import UsageId
from reservation.ports.exceptions import (
    ReconciliationError,
    RepositoryConnectionError,
    ResourceUsageNotFoundError,
)
from reservation.presentation.models import (
    CreateReservationRequest,
    ReservationResponse,
    UnknownResourceError,
    UpdateReservationRequest,
    selections_to_domain,
)
from shared_kernel.email_address import EmailAddress, InvalidEmailAddressError

router = APIRouter(
    prefix="/reservations",
    tags=["reservations"],
)


def _to_http_exception(error: Exception) -> HTTPException:
    match error:
        case ResourceConflictError():
            return HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "message": str(error),
                    "resource": error.resource_description,
                    "conflicting_reservation_id": error.conflicting_usage_id,
                },
            )
        case ForbiddenError():
            return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
        case ResourceUsageNotFoundError():
            return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
        case ResourceUsageError() | UnknownResourceError() | InvalidEmailAddressError():
            return HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error)
            )
        case RepositoryConnectionError():
            return HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Reservation storage is unavailable, try again later",
            )
        case ReconciliationError():
            return HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Reservation data is inconsistent: {error}",
            )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Unexpected error",
    )


_HANDLED_ERRORS = (
    ResourceConflictError,
    ForbiddenError,
    ResourceUsageNotFoundError,
    ResourceUsageError,
    UnknownResourceError,
    InvalidEmailAddressError,
    RepositoryConnectionError,
    ReconciliationError,
)


def _parse_usage_id(usage_id: str) -> UsageId:
    try:
        return UsageId.from_string(usage_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid reservation ID",
        )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Reserve resources",
    responses={
        201: {"description": "Reservation created"},
        409: {"description": "A resource is already reserved in the window"},
        422: {"description": "Invalid window or resource selection"},
        503: {"description": "Calendar backend unavailable"},
    },
)
async def create_reservation(
    request: CreateReservationRequest,
    actor_email: Annotated[EmailAddress, Depends(get_actor_email)],
    service: Annotated[ResourceUsageService, Depends(get_resource_usage_service)],
    config: Annotated[ResourceConfig, Depends(get_resource_config)],
) -> ReservationResponse:
    """Reserve GPUs or a room for the acting lab member.

    Raises:
        HTTPException: 409 if a resource is already reserved in the window
        HTTPException: 422 if the window or the selection is invalid
        HTTPException: 503 if the calendar backend is unreachable
    """
    try:
        usage = await service.create_reservation(
            owner_email=actor_email,
            time_period=request.time_period(),
            resources=selections_to_domain(request.resources, config),
            notes=request.notes,
        )
        return ReservationResponse.from_domain(usage)

    except _HANDLED_ERRORS as e:
        raise _to_http_exception(e) from e


@router.get("", summary="List future reservations")
async def list_reservations(
    service: Annotated[ResourceUsageService, Depends(get_resource_usage_service)],
    owner: Annotated[
        str | None, Query(description="Only reservations of this lab member")
    ] = None,
) -> list[ReservationResponse]:
    """List future and ongoing reservations, earliest first."""
    try:
        if owner is None:
            usages = await service.list_future_reservations()
        else:
            usages = await service.list_owner_reservations(EmailAddress.from_string(owner))
        return [ReservationResponse.from_domain(u) for u in usages]

    except _HANDLED_ERRORS as e:
        raise _to_http_exception(e) from e


@router.get("/{usage_id}", summary="Get a reservation")
async def get_reservation(
    usage_id: str,
    service: Annotated[ResourceUsageService, Depends(get_resource_usage_service)],
) -> ReservationResponse:
    """Get a reservation by its id (or by its calendar event id).

    Raises:
        HTTPException: 404 if the reservation does not exist
    """
    usage_id_obj = _parse_usage_id(usage_id)

    try:
        usage = await service.get_reservation(usage_id_obj)
    except _HANDLED_ERRORS as e:
        raise _to_http_exception(e) from e

    if usage is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reservation {usage_id} not found",
        )
    return ReservationResponse.from_domain(usage)


@router.patch("/{usage_id}", summary="Change a reservation")
async def update_reservation(
    usage_id: str,
    request: UpdateReservationRequest,
    actor_email: Annotated[EmailAddress, Depends(get_actor_email)],
    service: Annotated[ResourceUsageService, Depends(get_resource_usage_service)],
) -> ReservationResponse:
    """Move a reservation and/or change its notes. Owner only.

    Raises:
        HTTPException: 403 if the actor is not the owner
        HTTPException: 404 if the reservation does not exist
        HTTPException: 409 if the new window clashes
    """
    usage_id_obj = _parse_usage_id(usage_id)

    try:
        usage = await service.update_reservation(
            usage_id=usage_id_obj,
            actor_email=actor_email,
            new_time_period=request.time_period(),
            new_notes=request.notes,
        )
        return ReservationResponse.from_domain(usage)

    except _HANDLED_ERRORS as e:
        raise _to_http_exception(e) from e


@router.delete(
    "/{usage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a reservation",
)
async def delete_reservation(
    usage_id: str,
    actor_email: Annotated[EmailAddress, Depends(get_actor_email)],
    service: Annotated[ResourceUsageService, Depends(get_resource_usage_service)],
) -> None:
    """Cancel a reservation. Owner only.

    Raises:
        HTTPException: 403 if the actor is not the owner
        HTTPException: 404 if the reservation does not exist
    """
    usage_id_obj = _parse_usage_id(usage_id)

    try:
        await service.delete_reservation(usage_id=usage_id_obj, actor_email=actor_email)
    except _HANDLED_ERRORS as e:
        raise _to_http_exception(e) from e
