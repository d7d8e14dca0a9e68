"""Domain probe for resource access provisioning."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResourceAccessServiceProbe(Protocol):
    """Domain probe for granting access and linking identities."""

    def access_granted(self, email: str, collection_count: int) -> None:
        ...

    def identity_linked(self, email: str, system: str, user_id: str) -> None:
        ...

    def identity_already_linked(self, email: str, system: str) -> None:
        """A grant for an existing identical link; access was re-granted."""
        ...

    def link_rejected(self, email: str, system: str, reason: str) -> None:
        ...

    def identity_unlinked(self, email: str, system: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> ResourceAccessServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceAccessServiceProbe:
    """Default implementation of ResourceAccessServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultResourceAccessServiceProbe:
        return DefaultResourceAccessServiceProbe(logger=self._logger, context=context)

    def access_granted(self, email: str, collection_count: int) -> None:
        self._logger.info(
            "resource_access_granted",
            email=email,
            collection_count=collection_count,
            **self._get_context_kwargs(),
        )

    def identity_linked(self, email: str, system: str, user_id: str) -> None:
        self._logger.info(
            "identity_linked",
            email=email,
            system=system,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def identity_already_linked(self, email: str, system: str) -> None:
        self._logger.info(
            "identity_already_linked",
            email=email,
            system=system,
            **self._get_context_kwargs(),
        )

    def link_rejected(self, email: str, system: str, reason: str) -> None:
        self._logger.warning(
            "identity_link_rejected",
            email=email,
            system=system,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def identity_unlinked(self, email: str, system: str) -> None:
        self._logger.info(
            "identity_unlinked",
            email=email,
            system=system,
            **self._get_context_kwargs(),
        )
