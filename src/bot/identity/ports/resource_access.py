"""Resource collection access port.

A resource collection is what holds a resource's reservations (a calendar
per server or room). Lab members need access to every collection to see
and edit reservations outside the bot.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.email_address import EmailAddress


@runtime_checkable
class IResourceCollectionAccess(Protocol):
    async def grant_access(self, collection_id: str, email: EmailAddress) -> None:
        """Give ``email`` read/write access to a collection.

        Granting twice is harmless.

        Raises:
            ResourceAccessError: If the grant was rejected
        """
        ...
