"""Unit tests for device-spec parsing and formatting."""

import pytest

from reservation.domain.exceptions import (
    DeviceNotFoundError,
    EmptySpecificationError,
    InvalidFormatError,
    InvalidNumberError,
    InvalidRangeError,
    ResourceSpecError,
)
from reservation.domain.factory import ResourceFactory, format_device_spec
from reservation.domain.value_objects import Gpu

MODELS = {0: "A100", 1: "A100", 2: "A100", 3: "H100"}


def _create(spec: str) -> list[Gpu]:
    return ResourceFactory.create_gpus_from_spec(
        spec,
        server_name="Thalys",
        all_device_ids=list(MODELS),
        device_lookup=MODELS.get,
    )


class TestParseDeviceNumbers:
    @pytest.mark.parametrize(
        ("spec", "expected"),
        [
            ("1", [1]),
            ("0-2", [0, 1, 2]),
            ("0-2,5", [0, 1, 2, 5]),
            ("5,0-1", [5, 0, 1]),
            (" 1 , 3 ", [1, 3]),
            ("2-2", [2]),
            ("1,,3", [1, 3]),
        ],
    )
    def test_valid_specs(self, spec, expected):
        assert ResourceFactory.parse_device_numbers(spec) == expected

    def test_duplicates_keep_first_occurrence(self):
        assert ResourceFactory.parse_device_numbers("1,0-2,1") == [1, 0, 2]

    @pytest.mark.parametrize("spec", ["", " ", ",", ", ,"])
    def test_empty_spec(self, spec):
        with pytest.raises(EmptySpecificationError):
            ResourceFactory.parse_device_numbers(spec)

    @pytest.mark.parametrize("spec", ["a", "1,x", "-1", "1.5"])
    def test_invalid_number(self, spec):
        with pytest.raises(InvalidNumberError):
            ResourceFactory.parse_device_numbers(spec)

    def test_range_with_two_dashes_is_invalid_format(self):
        with pytest.raises(InvalidFormatError) as exc_info:
            ResourceFactory.parse_device_numbers("0-1-2")

        assert exc_info.value.token == "0-1-2"

    def test_inverted_range(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            ResourceFactory.parse_device_numbers("3-1")

        assert (exc_info.value.start, exc_info.value.end) == (3, 1)

    def test_errors_share_a_base_class(self):
        for spec in ["", "x", "0-1-2", "3-1"]:
            with pytest.raises(ResourceSpecError):
                ResourceFactory.parse_device_numbers(spec)


class TestCreateGpusFromSpec:
    def test_all_expands_to_every_device(self):
        gpus = _create("all")
        assert [g.device_number for g in gpus] == [0, 1, 2, 3]

    def test_all_is_case_insensitive(self):
        assert len(_create(" ALL ")) == 4

    def test_models_come_from_lookup(self):
        gpus = _create("2-3")

        assert gpus == [
            Gpu(server="Thalys", device_number=2, model="A100"),
            Gpu(server="Thalys", device_number=3, model="H100"),
        ]

    def test_unknown_device(self):
        with pytest.raises(DeviceNotFoundError) as exc_info:
            _create("1,7")

        assert exc_info.value.server == "Thalys"
        assert exc_info.value.device_number == 7


class TestFormatDeviceSpec:
    @pytest.mark.parametrize(
        ("numbers", "expected"),
        [
            ([0], "0"),
            ([0, 1, 2], "0-2"),
            ([0, 1, 2, 5], "0-2,5"),
            ([5, 2, 1, 0], "0-2,5"),
            ([1, 3, 5], "1,3,5"),
            ([0, 1, 3, 4, 7], "0-1,3-4,7"),
            ([2, 2, 3], "2-3"),
            ([], ""),
        ],
    )
    def test_compresses_consecutive_runs(self, numbers, expected):
        assert format_device_spec(numbers) == expected

    def test_output_parses_back(self):
        spec = format_device_spec([7, 0, 1, 2, 4])
        assert sorted(ResourceFactory.parse_device_numbers(spec)) == [0, 1, 2, 4, 7]
