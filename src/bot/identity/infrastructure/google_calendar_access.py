"""Resource collection access through Google Calendar ACLs."""

from __future__ import annotations

from infrastructure.google_calendar import GoogleCalendarApiError, ICalendarClient
from identity.ports.exceptions import ResourceAccessError
from shared_kernel.email_address import EmailAddress

WRITER_ROLE = "writer"


class GoogleCalendarCollectionAccess:
    """IResourceCollectionAccess inserting a ``writer`` ACL rule per calendar.

    Inserting a rule for a user who already has one updates it in place, so
    repeated grants are harmless.
    """

    def __init__(self, client: ICalendarClient, role: str = WRITER_ROLE):
        self._client = client
        self._role = role

    async def grant_access(self, collection_id: str, email: EmailAddress) -> None:
        try:
            await self._client.insert_acl(collection_id, email.value, self._role)
        except GoogleCalendarApiError as e:
            raise ResourceAccessError(collection_id, str(e)) from e


class NoopCollectionAccess:
    """Grants nothing. Used with the in-memory reservation backend."""

    async def grant_access(self, collection_id: str, email: EmailAddress) -> None:
        return None
