"""Pydantic models for reservation API requests and responses."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from infrastructure.resource_config import ResourceConfig
from reservation.domain.aggregates import ResourceUsage
from reservation.domain.factory import ResourceFactory
from reservation.domain.value_objects import Gpu, Resource, Room, TimePeriod


class UnknownResourceError(ValueError):
    """Raised when a request names a server or room missing from the catalog."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind}: {name}")


class GpuSelection(BaseModel):
    """GPUs of one server in device-spec notation."""

    type: Literal["gpu"] = "gpu"
    server: str = Field(..., min_length=1, description="Server name")
    devices: str = Field(
        ..., min_length=1, description='Device spec, e.g. "all", "1" or "0-2,5"'
    )

    def to_domain(self, config: ResourceConfig) -> list[Resource]:
        server = config.get_server(self.server)
        if server is None:
            raise UnknownResourceError("server", self.server)
        return list(
            ResourceFactory.create_gpus_from_spec(
                self.devices,
                server_name=server.name,
                all_device_ids=server.device_ids,
                device_lookup=server.model_of,
            )
        )


class RoomSelection(BaseModel):
    type: Literal["room"] = "room"
    name: str = Field(..., min_length=1, description="Room name")

    def to_domain(self, config: ResourceConfig) -> list[Resource]:
        if config.get_room(self.name) is None:
            raise UnknownResourceError("room", self.name)
        return [Room(name=self.name)]


ResourceSelection = Annotated[GpuSelection | RoomSelection, Field(discriminator="type")]


def selections_to_domain(
    selections: list[GpuSelection | RoomSelection], config: ResourceConfig
) -> list[Resource]:
    """Expand request selections into resources, keeping request order.

    Raises:
        UnknownResourceError: If a server or room is not configured
        ResourceSpecError: If a device spec is malformed or names an unknown device
    """
    resources: list[Resource] = []
    for selection in selections:
        for resource in selection.to_domain(config):
            if resource not in resources:
                resources.append(resource)
    return resources


class CreateReservationRequest(BaseModel):
    """Request model for reserving resources.

    The owner is the acting lab member (``X-Actor-Email``).
    """

    start: AwareDatetime = Field(..., description="Start instant, with offset")
    end: AwareDatetime = Field(..., description="End instant, with offset")
    resources: list[ResourceSelection] = Field(..., min_length=1)
    notes: str | None = Field(default=None, max_length=2000)

    def time_period(self) -> TimePeriod:
        return TimePeriod(start=self.start, end=self.end)


class UpdateReservationRequest(BaseModel):
    """Request model for changing a reservation.

    ``start`` and ``end`` are given together or not at all.
    """

    start: AwareDatetime | None = None
    end: AwareDatetime | None = None
    notes: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def validate_period_pair(self) -> UpdateReservationRequest:
        if (self.start is None) != (self.end is None):
            raise ValueError("start and end must be given together")
        return self

    def time_period(self) -> TimePeriod | None:
        if self.start is None or self.end is None:
            return None
        return TimePeriod(start=self.start, end=self.end)


class GpuResponse(BaseModel):
    type: Literal["gpu"] = "gpu"
    server: str
    device_number: int
    model: str


class RoomResponse(BaseModel):
    type: Literal["room"] = "room"
    name: str


class ReservationResponse(BaseModel):
    """Response model for a reservation."""

    id: str
    owner_email: str
    start: AwareDatetime
    end: AwareDatetime
    resources: list[GpuResponse | RoomResponse]
    notes: str | None

    @classmethod
    def from_domain(cls, usage: ResourceUsage) -> ReservationResponse:
        resources: list[GpuResponse | RoomResponse] = []
        for resource in usage.resources:
            match resource:
                case Gpu(server=server, device_number=number, model=model):
                    resources.append(
                        GpuResponse(server=server, device_number=number, model=model)
                    )
                case Room(name=name):
                    resources.append(RoomResponse(name=name))

        return cls(
            id=usage.id.value,
            owner_email=usage.owner_email.value,
            start=usage.time_period.start,
            end=usage.time_period.end,
            resources=resources,
            notes=usage.notes,
        )
