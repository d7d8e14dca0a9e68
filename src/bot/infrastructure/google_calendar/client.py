"""Thin async client for the Google Calendar API v3.

Covers the calls the bot needs: listing, reading, inserting, updating and
deleting events, and inserting ACL rules. Authentication is a bearer token
obtained elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

import httpx

from infrastructure.settings import GoogleCalendarSettings

_MAX_RESULTS_PER_PAGE = 2500


class GoogleCalendarApiError(Exception):
    """Raised when the Calendar API cannot be reached or rejects a call.

    Attributes:
        status_code: HTTP status, or None for transport failures
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class CalendarEvent:
    """The subset of a Calendar event resource the bot reads and writes.

    Only timed events are meaningful to the bot; all-day events come back
    with ``start``/``end`` set to None.
    """

    id: str | None = None
    summary: str | None = None
    description: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    creator_email: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CalendarEvent:
        """Build from an API ``Event`` resource.

        Raises:
            ValueError: If a ``dateTime`` field is not RFC 3339
        """
        return cls(
            id=data.get("id"),
            summary=data.get("summary"),
            description=data.get("description"),
            start=_parse_event_datetime(data.get("start")),
            end=_parse_event_datetime(data.get("end")),
            creator_email=(data.get("creator") or {}).get("email"),
        )

    def to_api(self) -> dict[str, Any]:
        """Request body for insert/update. Read-only fields are omitted."""
        body: dict[str, Any] = {}
        if self.id is not None:
            body["id"] = self.id
        if self.summary is not None:
            body["summary"] = self.summary
        if self.description is not None:
            body["description"] = self.description
        if self.start is not None:
            body["start"] = {"dateTime": self.start.isoformat()}
        if self.end is not None:
            body["end"] = {"dateTime": self.end.isoformat()}
        return body


def _parse_event_datetime(value: dict[str, Any] | None) -> datetime | None:
    if not value or "dateTime" not in value:
        return None
    return datetime.fromisoformat(value["dateTime"])


@runtime_checkable
class ICalendarClient(Protocol):
    """Calendar operations used by the adapters."""

    async def list_events(
        self, calendar_id: str, time_min: datetime
    ) -> list[dict[str, Any]]:
        """List raw event resources ending after ``time_min``."""
        ...

    async def get_event(self, calendar_id: str, event_id: str) -> CalendarEvent | None:
        """Fetch one event, or None if it does not exist."""
        ...

    async def insert_event(self, calendar_id: str, event: CalendarEvent) -> CalendarEvent:
        """Create an event and return it with its server-assigned id."""
        ...

    async def update_event(
        self, calendar_id: str, event_id: str, event: CalendarEvent
    ) -> CalendarEvent:
        """Replace an existing event."""
        ...

    async def delete_event(self, calendar_id: str, event_id: str) -> bool:
        """Delete an event. Returns False if it did not exist."""
        ...

    async def insert_acl(self, calendar_id: str, email: str, role: str) -> None:
        """Grant ``role`` on a calendar to a user."""
        ...


class GoogleCalendarClient:
    """ICalendarClient over ``httpx.AsyncClient``.

    Missing events (404, or 410 for already deleted ones) are reported as
    None/False. Every other failure raises GoogleCalendarApiError.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://www.googleapis.com/calendar/v3",
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Authorization": f"Bearer {access_token}"},
        )

    @classmethod
    def from_settings(cls, settings: GoogleCalendarSettings) -> GoogleCalendarClient:
        return cls(
            access_token=settings.access_token.get_secret_value(),
            base_url=settings.api_base_url,
            timeout_seconds=settings.timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_events(
        self, calendar_id: str, time_min: datetime
    ) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        params: dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "singleEvents": "true",
            "maxResults": _MAX_RESULTS_PER_PAGE,
        }
        while True:
            response = await self._request(
                "GET", f"{_calendar_path(calendar_id)}/events", params=params
            )
            payload = response.json()
            items.extend(payload.get("items", []))

            page_token = payload.get("nextPageToken")
            if not page_token:
                return items
            params["pageToken"] = page_token

    async def get_event(self, calendar_id: str, event_id: str) -> CalendarEvent | None:
        response = await self._request(
            "GET", _event_path(calendar_id, event_id), allow_missing=True
        )
        if response is None:
            return None
        return CalendarEvent.from_api(response.json())

    async def insert_event(self, calendar_id: str, event: CalendarEvent) -> CalendarEvent:
        response = await self._request(
            "POST", f"{_calendar_path(calendar_id)}/events", json=event.to_api()
        )
        return CalendarEvent.from_api(response.json())

    async def update_event(
        self, calendar_id: str, event_id: str, event: CalendarEvent
    ) -> CalendarEvent:
        response = await self._request(
            "PUT", _event_path(calendar_id, event_id), json=event.to_api()
        )
        return CalendarEvent.from_api(response.json())

    async def delete_event(self, calendar_id: str, event_id: str) -> bool:
        response = await self._request(
            "DELETE", _event_path(calendar_id, event_id), allow_missing=True
        )
        return response is not None

    async def insert_acl(self, calendar_id: str, email: str, role: str) -> None:
        await self._request(
            "POST",
            f"{_calendar_path(calendar_id)}/acl",
            json={"role": role, "scope": {"type": "user", "value": email}},
        )

    async def _request(
        self,
        method: str,
        url: str,
        allow_missing: bool = False,
        **kwargs: Any,
    ) -> httpx.Response | None:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GoogleCalendarApiError(f"Calendar API unreachable: {e}") from e

        if allow_missing and response.status_code in (404, 410):
            return None
        if response.is_error:
            raise GoogleCalendarApiError(
                f"Calendar API {method} {url} failed with "
                f"{response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response


def _calendar_path(calendar_id: str) -> str:
    return f"/calendars/{quote(calendar_id, safe='')}"


def _event_path(calendar_id: str, event_id: str) -> str:
    return f"{_calendar_path(calendar_id)}/events/{quote(event_id, safe='')}"
