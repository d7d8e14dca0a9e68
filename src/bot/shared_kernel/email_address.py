"""Email address value object shared across bounded contexts.

The email address is the primary identity of a lab member: reservations are
owned by an email, and identity links are keyed by one.
"""

from __future__ import annotations

from dataclasses import dataclass


class InvalidEmailAddressError(ValueError):
    """Raised when a string cannot be used as an email address."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid email address: {value!r}")


@dataclass(frozen=True)
class EmailAddress:
    """Immutable email address.

    Only the structural minimum is validated (a single ``@`` separating a
    non-empty local part from a non-empty domain). Deliverability is the
    calendar backend's concern.
    """

    value: str

    def __post_init__(self) -> None:
        local, sep, domain = self.value.partition("@")
        if not sep or not local or not domain or "@" in domain:
            raise InvalidEmailAddressError(self.value)
        if any(ch.isspace() for ch in self.value):
            raise InvalidEmailAddressError(self.value)

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @property
    def local_part(self) -> str:
        """The part before the ``@``."""
        return self.value.partition("@")[0]

    @classmethod
    def from_string(cls, value: str) -> EmailAddress:
        """Create an EmailAddress from user input, trimming surrounding whitespace.

        Raises:
            InvalidEmailAddressError: If value is not a valid email address
        """
        return cls(value=value.strip())
