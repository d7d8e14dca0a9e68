"""Value objects for the identity domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class ExternalSystem(StrEnum):
    """External platforms a lab member can be linked to."""

    SLACK = "slack"


@dataclass(frozen=True)
class ExternalIdentity:
    """A lab member's account on one external platform.

    Attributes:
        system: The platform
        user_id: The platform's user id (e.g. Slack ``U12345678``)
        linked_at: When the link was made
    """

    system: ExternalSystem
    user_id: str
    linked_at: datetime

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("External user id cannot be empty")
