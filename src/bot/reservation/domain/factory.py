"""Factory turning device-spec notation into concrete resources.

The notation is used both in chat input and in the short title of calendar
events:

    "all"        every device configured on the server
    "3"          a single device
    "0-2"        an inclusive range
    "0-2,5,7-9"  any comma-separated combination
"""

from __future__ import annotations

from typing import Callable, Iterable

from reservation.domain.exceptions import (
    DeviceNotFoundError,
    EmptySpecificationError,
    InvalidFormatError,
    InvalidNumberError,
    InvalidRangeError,
)
from reservation.domain.value_objects import Gpu

SPEC_ALL = "all"


class ResourceFactory:
    """Builds Gpu resources from a device spec and the server's device table."""

    @classmethod
    def create_gpus_from_spec(
        cls,
        spec: str,
        server_name: str,
        all_device_ids: Iterable[int],
        device_lookup: Callable[[int], str | None],
    ) -> list[Gpu]:
        """Expand a device spec into GPUs of one server.

        Args:
            spec: Device spec (``"all"``, ``"1"``, ``"0-2,5"``...)
            server_name: Server the devices belong to
            all_device_ids: Devices configured on the server, used for ``"all"``
            device_lookup: Returns the model of a device, or None if unknown

        Returns:
            GPUs in spec order, duplicates removed

        Raises:
            ResourceSpecError: If the spec is malformed or names an unknown device
        """
        if spec.strip().lower() == SPEC_ALL:
            device_numbers = list(all_device_ids)
        else:
            device_numbers = cls.parse_device_numbers(spec)

        gpus: list[Gpu] = []
        for number in device_numbers:
            model = device_lookup(number)
            if model is None:
                raise DeviceNotFoundError(server=server_name, device_number=number)
            gpus.append(Gpu(server=server_name, device_number=number, model=model))
        return gpus

    @staticmethod
    def parse_device_numbers(spec: str) -> list[int]:
        """Parse a spec into device numbers, keeping first-seen order.

        Raises:
            EmptySpecificationError: No number in the spec
            InvalidNumberError: A part is not a non-negative integer
            InvalidFormatError: A range part has more than one dash
            InvalidRangeError: A range is inverted
        """
        numbers: list[int] = []
        seen: set[int] = set()

        def add(number: int) -> None:
            if number not in seen:
                seen.add(number)
                numbers.append(number)

        for raw_part in spec.split(","):
            part = raw_part.strip()
            if not part:
                continue

            if "-" in part:
                bounds = part.split("-")
                if len(bounds) != 2:
                    raise InvalidFormatError(part)
                start = _parse_number(bounds[0])
                end = _parse_number(bounds[1])
                if start > end:
                    raise InvalidRangeError(start=start, end=end)
                for number in range(start, end + 1):
                    add(number)
            else:
                add(_parse_number(part))

        if not numbers:
            raise EmptySpecificationError()
        return numbers


def _parse_number(token: str) -> int:
    token = token.strip()
    if not token.isdigit():
        raise InvalidNumberError(token)
    return int(token)


def format_device_spec(device_numbers: Iterable[int]) -> str:
    """Render device numbers in compact notation, e.g. ``[0, 1, 2, 5]`` -> ``"0-2,5"``.

    The output is accepted by ResourceFactory.parse_device_numbers.
    """
    ordered = sorted(set(device_numbers))
    if not ordered:
        return ""

    parts: list[str] = []
    run_start = run_end = ordered[0]
    for number in ordered[1:]:
        if number == run_end + 1:
            run_end = number
            continue
        parts.append(_format_run(run_start, run_end))
        run_start = run_end = number
    parts.append(_format_run(run_start, run_end))
    return ",".join(parts)


def _format_run(start: int, end: int) -> str:
    if start == end:
        return str(start)
    return f"{start}-{end}"
