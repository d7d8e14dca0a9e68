"""Resource catalog configuration.

The catalog is a TOML file listing GPU servers (one calendar each, with their
devices) and rooms, plus the notification destinations of each:

    [[servers]]
    name = "Thalys"
    calendar_id = "thalys@group.calendar.google.com"

    [[servers.devices]]
    id = 0
    model = "A100 80GB PCIe"

    [[servers.notifications]]
    type = "slack"
    webhook_url = "https://hooks.slack.com/services/..."
    timezone = "Asia/Tokyo"

    [[rooms]]
    name = "Meeting Room A"
    calendar_id = "room-a@group.calendar.google.com"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from reservation.domain.value_objects import Gpu, Resource, Room


class SlackDestination(BaseModel):
    """Post notifications to a Slack incoming webhook."""

    model_config = ConfigDict(frozen=True)

    type: Literal["slack"] = "slack"
    webhook_url: str
    timezone: str | None = None

    @property
    def label(self) -> str:
        # Webhook paths are secrets; only the host is logged.
        host = self.webhook_url.split("://", 1)[-1].split("/", 1)[0]
        return f"slack:{host}"


class LogDestination(BaseModel):
    """Write notifications to the application log (development and tests)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["mock"] = "mock"
    timezone: str | None = None

    @property
    def label(self) -> str:
        return "mock"


NotificationDestination = Annotated[
    SlackDestination | LogDestination, Field(discriminator="type")
]


class DeviceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    model: str = Field(min_length=1)


class ServerConfig(BaseModel):
    """A GPU server and the calendar holding its reservations."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    calendar_id: str = Field(min_length=1)
    devices: tuple[DeviceConfig, ...] = ()
    notifications: tuple[NotificationDestination, ...] = ()

    @model_validator(mode="after")
    def validate_unique_devices(self) -> "ServerConfig":
        ids = [d.id for d in self.devices]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate device id on server {self.name}")
        return self

    @property
    def device_ids(self) -> list[int]:
        return [d.id for d in self.devices]

    def model_of(self, device_id: int) -> str | None:
        for device in self.devices:
            if device.id == device_id:
                return device.model
        return None


class RoomConfig(BaseModel):
    """A room and the calendar holding its reservations."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    calendar_id: str = Field(min_length=1)
    notifications: tuple[NotificationDestination, ...] = ()


class ResourceConfig(BaseModel):
    """The lab's resource catalog.

    Each calendar belongs to exactly one server or room, so a calendar id
    identifies the resource context of every event found in it.
    """

    model_config = ConfigDict(frozen=True)

    servers: tuple[ServerConfig, ...] = ()
    rooms: tuple[RoomConfig, ...] = ()

    @model_validator(mode="after")
    def validate_unique_names_and_calendars(self) -> "ResourceConfig":
        names = [s.name for s in self.servers] + [r.name for r in self.rooms]
        if len(names) != len(set(names)):
            raise ValueError("Server and room names must be unique")

        calendars = self.calendar_ids
        if len(calendars) != len(set(calendars)):
            raise ValueError("Each calendar can belong to only one server or room")
        return self

    @property
    def calendar_ids(self) -> list[str]:
        """Every configured calendar, servers first."""
        return [s.calendar_id for s in self.servers] + [
            r.calendar_id for r in self.rooms
        ]

    def get_server(self, name: str) -> ServerConfig | None:
        return next((s for s in self.servers if s.name == name), None)

    def get_room(self, name: str) -> RoomConfig | None:
        return next((r for r in self.rooms if r.name == name), None)

    def context_for_calendar(self, calendar_id: str) -> ServerConfig | RoomConfig | None:
        """The server or room owning a calendar."""
        for entry in (*self.servers, *self.rooms):
            if entry.calendar_id == calendar_id:
                return entry
        return None

    def destinations_for(self, resource: Resource) -> tuple[NotificationDestination, ...]:
        """Notification destinations configured for the owner of a resource."""
        match resource:
            case Gpu(server=server_name):
                server = self.get_server(server_name)
                return server.notifications if server else ()
            case Room(name=room_name):
                room = self.get_room(room_name)
                return room.notifications if room else ()
        return ()


def load_resource_config(path: Path | str) -> ResourceConfig:
    """Load and validate the TOML resource catalog.

    Raises:
        FileNotFoundError: If the file does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
        pydantic.ValidationError: If the catalog is inconsistent
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return ResourceConfig.model_validate(data)
