"""Unit tests for the TOML resource catalog."""

import tomllib

import pytest
from pydantic import ValidationError

from infrastructure.resource_config import (
    LogDestination,
    ResourceConfig,
    SlackDestination,
    load_resource_config,
)
from reservation.domain.value_objects import Gpu, Room

CATALOG = """
[[servers]]
name = "Thalys"
calendar_id = "thalys@group.calendar.google.com"

[[servers.devices]]
id = 0
model = "A100 80GB PCIe"

[[servers.devices]]
id = 1
model = "A100 80GB PCIe"

[[servers.notifications]]
type = "slack"
webhook_url = "https://hooks.slack.com/services/T000/B000/secret"
timezone = "Asia/Tokyo"

[[servers.notifications]]
type = "mock"

[[rooms]]
name = "Meeting Room A"
calendar_id = "room-a@group.calendar.google.com"
"""


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "resources.toml"
    path.write_text(CATALOG)
    return path


class TestLoadResourceConfig:
    def test_loads_servers_rooms_and_destinations(self, catalog_file):
        config = load_resource_config(catalog_file)

        thalys = config.get_server("Thalys")
        assert thalys.device_ids == [0, 1]
        assert thalys.model_of(1) == "A100 80GB PCIe"
        assert thalys.model_of(7) is None
        assert isinstance(thalys.notifications[0], SlackDestination)
        assert isinstance(thalys.notifications[1], LogDestination)
        assert config.get_room("Meeting Room A").notifications == ()
        assert config.calendar_ids == [
            "thalys@group.calendar.google.com",
            "room-a@group.calendar.google.com",
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_resource_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[[servers]\nname=")

        with pytest.raises(tomllib.TOMLDecodeError):
            load_resource_config(path)

    def test_unknown_destination_type(self, tmp_path):
        path = tmp_path / "resources.toml"
        path.write_text(
            '[[rooms]]\nname = "R"\ncalendar_id = "r@cal"\n'
            '[[rooms.notifications]]\ntype = "email"\n'
        )

        with pytest.raises(ValidationError):
            load_resource_config(path)


class TestResourceConfigValidation:
    def test_duplicate_device_ids(self):
        with pytest.raises(ValidationError, match="Duplicate device id"):
            ResourceConfig.model_validate(
                {
                    "servers": [
                        {
                            "name": "Thalys",
                            "calendar_id": "c1",
                            "devices": [{"id": 0, "model": "A"}, {"id": 0, "model": "B"}],
                        }
                    ]
                }
            )

    def test_duplicate_names(self):
        with pytest.raises(ValidationError, match="unique"):
            ResourceConfig.model_validate(
                {
                    "servers": [{"name": "Thalys", "calendar_id": "c1"}],
                    "rooms": [{"name": "Thalys", "calendar_id": "c2"}],
                }
            )

    def test_shared_calendar(self):
        with pytest.raises(ValidationError, match="one server or room"):
            ResourceConfig.model_validate(
                {
                    "servers": [{"name": "Thalys", "calendar_id": "c1"}],
                    "rooms": [{"name": "Room", "calendar_id": "c1"}],
                }
            )

    def test_negative_device_id(self):
        with pytest.raises(ValidationError):
            ResourceConfig.model_validate(
                {
                    "servers": [
                        {"name": "T", "calendar_id": "c", "devices": [{"id": -1, "model": "A"}]}
                    ]
                }
            )


class TestResourceConfigLookups:
    def test_context_for_calendar(self, resource_config):
        assert resource_config.context_for_calendar(
            "room-a@group.calendar.google.com"
        ).name == "Meeting Room A"
        assert resource_config.context_for_calendar("unknown") is None

    def test_destinations_for_gpu(self, resource_config, thalys_gpu):
        (destination,) = resource_config.destinations_for(thalys_gpu(0))
        assert destination.label == "slack:hooks.slack.com"

    def test_destinations_for_room(self, resource_config):
        (destination,) = resource_config.destinations_for(Room("Meeting Room A"))
        assert destination.label == "mock"
        assert destination.timezone == "Asia/Tokyo"

    def test_destinations_for_unknown_resource(self, resource_config):
        assert resource_config.destinations_for(Gpu("Nowhere", 0, "X")) == ()
