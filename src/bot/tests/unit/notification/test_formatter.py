"""Unit tests for notification message rendering."""

import pytest

from notification.formatter import event_type_of, format_message
from reservation.domain.events import (
    ResourceUsageCreated,
    ResourceUsageDeleted,
    ResourceUsageUpdated,
)
from reservation.domain.value_objects import Room


class TestFormatMessage:
    def test_created_gpu_reservation(self, make_usage, thalys_gpu):
        usage = make_usage(
            usage_id="u-1", resources=[thalys_gpu(0), thalys_gpu(1)], notes="training"
        )

        message = format_message(ResourceUsageCreated(usage), "<@U123>", "Asia/Tokyo")

        assert message.text == (
            "[New reservation] <@U123>\n"
            "Period: 2030-01-07 19:00 - 2030-01-07 21:00 (Asia/Tokyo)\n"
            "Reserved GPUs:\n"
            "Thalys / A100 80GB PCIe / GPU:0\n"
            "Thalys / A100 80GB PCIe / GPU:1\n"
            "Notes: training"
        )
        assert message.usage_id == "u-1"
        assert message.event_type == "created"

    def test_updated_room_reservation_omits_notes(self, make_usage):
        usage = make_usage(resources=[Room("Meeting Room A")], notes="sync")

        message = format_message(ResourceUsageUpdated(usage), "a@x.com", "UTC")

        assert message.text.splitlines() == [
            "[Updated reservation] a@x.com",
            "Period: 2030-01-07 10:00 - 2030-01-07 12:00 (UTC)",
            "Reserved room:",
            "Meeting Room A",
        ]
        assert message.event_type == "updated"

    def test_deleted_mixed_reservation(self, make_usage, thalys_gpu):
        usage = make_usage(resources=[thalys_gpu(2), Room("Meeting Room A")])

        message = format_message(ResourceUsageDeleted(usage), "a@x.com", "UTC")

        lines = message.text.splitlines()
        assert lines[0] == "[Cancelled reservation] a@x.com"
        assert lines[2] == "Reserved resources:"
        assert message.event_type == "deleted"

    def test_unknown_timezone_falls_back_to_local_offset(self, make_usage):
        message = format_message(
            ResourceUsageCreated(make_usage()), "a@x.com", "Mars/Olympus"
        )

        period_line = message.text.splitlines()[1]
        assert period_line.startswith("Period: ")
        assert "Mars" not in period_line


def test_event_type_of_rejects_other_objects():
    with pytest.raises(TypeError):
        event_type_of(object())
