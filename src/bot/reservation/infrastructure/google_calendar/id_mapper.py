"""Mapping between reservation ids and calendar event ids.

Calendar event ids are assigned by the calendar service and change when a
reservation moves to another calendar, so reservations keep their own ids and
this table links the two. It is persisted as a JSON object:

    {"<usage id>": {"calendar_id": "...", "event_id": "..."}}
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from reservation.domain.value_objects import UsageId
from reservation.ports.exceptions import (
    ReconciliationError,
    RepositoryConnectionError,
)


class ExternalEventId(BaseModel):
    """Location of a reservation's event: calendar plus event id."""

    model_config = ConfigDict(frozen=True)

    calendar_id: str
    event_id: str


_MappingFile = TypeAdapter(dict[str, ExternalEventId])


class CalendarIdMapper:
    """File-backed bidirectional map ``usage id <-> event id``.

    The file is loaded on first access. Every mutation rewrites the whole
    file while holding the lock, so writers queue behind each other.
    """

    def __init__(self, file_path: Path | str):
        self._file_path = Path(file_path)
        self._forward: dict[str, ExternalEventId] = {}
        self._reverse: dict[str, str] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def ensure_loaded(self) -> None:
        """Load the mapping file now instead of on first lookup.

        Raises:
            RepositoryConnectionError: If the file cannot be read
            ReconciliationError: If the file is corrupt
        """
        async with self._lock:
            self._ensure_loaded()

    async def get_external_id(self, domain_id: str) -> ExternalEventId | None:
        async with self._lock:
            self._ensure_loaded()
            return self._forward.get(domain_id)

    async def get_domain_id(self, event_id: str) -> str | None:
        async with self._lock:
            self._ensure_loaded()
            return self._reverse.get(event_id)

    async def save_mapping(self, domain_id: str, external_id: ExternalEventId) -> None:
        """Insert or replace the mapping of a reservation.

        Raises:
            RepositoryConnectionError: If the file cannot be written
        """
        async with self._lock:
            self._ensure_loaded()
            self._put(domain_id, external_id)
            self._write()

    async def delete_mapping(self, domain_id: str) -> None:
        """Remove a reservation's mapping. Unknown ids are ignored."""
        async with self._lock:
            self._ensure_loaded()
            previous = self._forward.pop(domain_id, None)
            if previous is None:
                return
            self._reverse.pop(previous.event_id, None)
            self._write()

    async def get_or_create_domain_id(
        self, calendar_id: str, event_id: str
    ) -> tuple[str, bool]:
        """Domain id of an event, assigning a fresh one on first sight.

        Returns:
            ``(domain id, created)``
        """
        async with self._lock:
            self._ensure_loaded()
            existing = self._reverse.get(event_id)
            if existing is not None:
                return existing, False

            domain_id = UsageId.generate().value
            self._put(
                domain_id, ExternalEventId(calendar_id=calendar_id, event_id=event_id)
            )
            self._write()
            return domain_id, True

    def _put(self, domain_id: str, external_id: ExternalEventId) -> None:
        previous = self._forward.get(domain_id)
        if previous is not None:
            self._reverse.pop(previous.event_id, None)
        self._forward[domain_id] = external_id
        self._reverse[external_id.event_id] = domain_id

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self._file_path.exists():
            try:
                raw = self._file_path.read_bytes()
            except OSError as e:
                raise RepositoryConnectionError(
                    f"Cannot read calendar mappings from {self._file_path}: {e}"
                ) from e
            try:
                self._forward = _MappingFile.validate_json(raw) if raw.strip() else {}
            except ValidationError as e:
                raise ReconciliationError(
                    f"Corrupt calendar mapping file {self._file_path}: {e}"
                ) from e
        self._reverse = {ext.event_id: domain_id for domain_id, ext in self._forward.items()}
        self._loaded = True

    def _write(self) -> None:
        data = {domain_id: ext.model_dump() for domain_id, ext in self._forward.items()}
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(data, indent=2, sort_keys=True))
        except OSError as e:
            raise RepositoryConnectionError(
                f"Cannot write calendar mappings to {self._file_path}: {e}"
            ) from e
