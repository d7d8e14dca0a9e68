"""Authorization policy for reservation mutations.

Only the owner of a reservation may change or cancel it. Anyone may read.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from reservation.domain.aggregates import ResourceUsage
from reservation.domain.exceptions import ForbiddenError
from shared_kernel.email_address import EmailAddress

T_contra = TypeVar("T_contra", contravariant=True)


class AuthorizationPolicy(Protocol[T_contra]):
    """Per-aggregate authorization rules.

    Methods return None on success and raise ForbiddenError otherwise.
    """

    def authorize_update(self, actor: EmailAddress, resource: T_contra) -> None: ...

    def authorize_delete(self, actor: EmailAddress, resource: T_contra) -> None: ...

    def authorize_read(self, actor: EmailAddress, resource: T_contra) -> None: ...


class ResourceUsageAuthorizationPolicy:
    """Owner-only mutation policy for ResourceUsage."""

    def authorize_update(self, actor: EmailAddress, resource: ResourceUsage) -> None:
        self._require_owner(actor, resource, action="update")

    def authorize_delete(self, actor: EmailAddress, resource: ResourceUsage) -> None:
        self._require_owner(actor, resource, action="delete")

    def authorize_read(self, actor: EmailAddress, resource: ResourceUsage) -> None:
        return None

    @staticmethod
    def _require_owner(
        actor: EmailAddress, resource: ResourceUsage, action: str
    ) -> None:
        if not resource.is_owned_by(actor):
            raise ForbiddenError(
                actor=actor.value,
                action=action,
                resource=f"ResourceUsage({resource.id.value})",
            )
