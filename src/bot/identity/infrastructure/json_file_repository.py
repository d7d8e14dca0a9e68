"""Identity link repository persisted as a JSON file.

The file holds one object keyed by email:

    {"a@x.com": {"email": "a@x.com",
                 "external_identities": [{"system": "slack",
                                          "user_id": "U123",
                                          "linked_at": "..."}],
                 "created_at": "...", "updated_at": "..."}}

It is read on first access and rewritten in full on every mutation.
"""

from __future__ import annotations

import asyncio
import copy
from pathlib import Path

from pydantic import ValidationError

from identity.domain.aggregates import IdentityLink
from identity.domain.value_objects import ExternalSystem
from identity.infrastructure.records import IdentityLinkFile, IdentityLinkRecord
from identity.ports.exceptions import IdentityLinkRepositoryError
from shared_kernel.email_address import EmailAddress, InvalidEmailAddressError


class JsonFileIdentityLinkRepository:
    """IIdentityLinkRepository over a single JSON file."""

    def __init__(self, file_path: Path | str):
        self._file_path = Path(file_path)
        self._links: dict[str, IdentityLink] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    async def find_by_email(self, email: EmailAddress) -> IdentityLink | None:
        async with self._lock:
            self._ensure_loaded()
            link = self._links.get(email.value)
            return copy.deepcopy(link) if link is not None else None

    async def find_by_external_user_id(
        self, system: ExternalSystem, user_id: str
    ) -> IdentityLink | None:
        async with self._lock:
            self._ensure_loaded()
            for link in self._links.values():
                identity = link.identity_for(system)
                if identity is not None and identity.user_id == user_id:
                    return copy.deepcopy(link)
            return None

    async def find_all(self) -> list[IdentityLink]:
        async with self._lock:
            self._ensure_loaded()
            return [copy.deepcopy(link) for link in self._links.values()]

    async def save(self, link: IdentityLink) -> None:
        async with self._lock:
            self._ensure_loaded()
            self._links[link.email.value] = copy.deepcopy(link)
            self._write()

    async def delete(self, email: EmailAddress) -> bool:
        async with self._lock:
            self._ensure_loaded()
            if self._links.pop(email.value, None) is None:
                return False
            self._write()
            return True

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self._file_path.exists():
            try:
                raw = self._file_path.read_bytes()
            except OSError as e:
                raise IdentityLinkRepositoryError(
                    f"Cannot read identity links from {self._file_path}: {e}"
                ) from e
            try:
                records = IdentityLinkFile.validate_json(raw) if raw.strip() else {}
                self._links = {
                    email: record.to_domain() for email, record in records.items()
                }
            except (ValidationError, InvalidEmailAddressError, ValueError) as e:
                raise IdentityLinkRepositoryError(
                    f"Corrupt identity link file {self._file_path}: {e}"
                ) from e
        self._loaded = True

    def _write(self) -> None:
        records = {
            email: IdentityLinkRecord.from_domain(link) for email, link in self._links.items()
        }
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_bytes(IdentityLinkFile.dump_json(records, indent=2))
        except OSError as e:
            raise IdentityLinkRepositoryError(
                f"Cannot write identity links to {self._file_path}: {e}"
            ) from e
