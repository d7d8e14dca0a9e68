"""HTTP routes for identity links and calendar access."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from identity.application.exceptions import (
    EmailAlreadyLinkedError,
    ExternalAccountAlreadyLinkedError,
    IdentityLinkNotFoundError,
)
from identity.application.services import ResourceAccessService
from identity.dependencies import get_resource_access_service
from identity.domain.exceptions import ExternalSystemNotLinkedError
from identity.domain.value_objects import ExternalSystem
from identity.ports.exceptions import IdentityLinkRepositoryError, ResourceAccessError
from identity.presentation.models import GrantAccessRequest, IdentityLinkResponse
from shared_kernel.email_address import EmailAddress, InvalidEmailAddressError

router = APIRouter(
    prefix="/identity-links",
    tags=["identity"],
)


def _parse_email(value: str) -> EmailAddress:
    try:
        return EmailAddress.from_string(value)
    except InvalidEmailAddressError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Grant calendar access and link an external account",
    responses={
        201: {"description": "Access granted and account linked"},
        409: {"description": "Email or account already linked elsewhere"},
        502: {"description": "A calendar rejected the access grant"},
        503: {"description": "Identity store unavailable"},
    },
)
async def grant_access(
    request: GrantAccessRequest,
    service: Annotated[ResourceAccessService, Depends(get_resource_access_service)],
) -> IdentityLinkResponse:
    """Grant a lab member access to every resource calendar.

    Raises:
        HTTPException: 409 if the email or the account is linked elsewhere
        HTTPException: 502 if a calendar rejected the grant
    """
    email = _parse_email(request.email)

    try:
        link = await service.grant_access(
            system=request.system,
            external_user_id=request.external_user_id,
            email=email,
        )
        return IdentityLinkResponse.from_domain(link)

    except (EmailAlreadyLinkedError, ExternalAccountAlreadyLinkedError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ResourceAccessError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    except IdentityLinkRepositoryError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity store is unavailable",
        ) from e


@router.get("/{email}", summary="Get the identity link of a lab member")
async def get_identity_link(
    email: str,
    service: Annotated[ResourceAccessService, Depends(get_resource_access_service)],
) -> IdentityLinkResponse:
    link = await service.get_link(_parse_email(email))
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No identity link for {email}",
        )
    return IdentityLinkResponse.from_domain(link)


@router.delete("/{email}/{system}", summary="Unlink an external account")
async def unlink_identity(
    email: str,
    system: ExternalSystem,
    service: Annotated[ResourceAccessService, Depends(get_resource_access_service)],
) -> IdentityLinkResponse:
    """Detach an external account. Calendar access is left in place.

    Raises:
        HTTPException: 404 if there is no link or the system is not linked
    """
    try:
        link = await service.unlink_identity(_parse_email(email), system)
        return IdentityLinkResponse.from_domain(link)

    except (IdentityLinkNotFoundError, ExternalSystemNotLinkedError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
