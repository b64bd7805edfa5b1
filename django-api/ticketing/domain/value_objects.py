"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self
from uuid import UUID

_SEAT_ID_PATTERN = re.compile(r"^([A-Z]+)([1-9][0-9]*)$")
_ROW_LABEL_PATTERN = re.compile(r"^[A-Z]+$")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BookingId:
    """Unique identifier for a Booking."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Amount of money held as integer minor units (cents)."""

    minor_units: int

    def __post_init__(self) -> None:
        if not isinstance(self.minor_units, int) or isinstance(self.minor_units, bool):
            raise TypeError("Money must be built from integer minor units")
        if self.minor_units < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def from_major(cls, amount: Decimal | str | int) -> Self:
        cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(minor_units=int(cents))

    @classmethod
    def zero(cls) -> Self:
        return cls(minor_units=0)

    @property
    def major(self) -> Decimal:
        return (Decimal(self.minor_units) / 100).quantize(Decimal("0.01"))

    def __mul__(self, count: int) -> "Money":
        if not isinstance(count, int) or isinstance(count, bool):
            return NotImplemented
        return Money(minor_units=self.minor_units * count)

    __rmul__ = __mul__

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(minor_units=self.minor_units + other.minor_units)

    def __str__(self) -> str:
        return f"{self.major:.2f}"


@dataclass(frozen=True)
class SeatId:
    """Row label plus 1-based seat number, e.g. row "A" seat 3 is "A3"."""

    row: str
    number: int

    def __post_init__(self) -> None:
        if not is_valid_row_label(self.row):
            raise ValueError(f"Invalid row label: {self.row!r}")
        if self.number < 1:
            raise ValueError("Seat number must be at least 1")

    @classmethod
    def parse(cls, value: str) -> Self:
        match = _SEAT_ID_PATTERN.match(normalize_seat_id(value))
        if match is None:
            raise ValueError(f"Invalid seat identifier: {value!r}")
        return cls(row=match.group(1), number=int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.row}{self.number}"


class BookingStatus(Enum):
    """Booking lifecycle states. Only CONFIRMED holds seats."""

    CONFIRMED = "CONFIRMED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"

    @property
    def holds_seats(self) -> bool:
        return self is BookingStatus.CONFIRMED


class Role(Enum):
    """Roles supplied by the identity provider."""

    ADMIN = "ADMIN"
    USER = "USER"


def normalize_seat_id(value: str) -> str:
    return str(value).strip().upper()


def is_valid_row_label(label: str) -> bool:
    return isinstance(label, str) and bool(_ROW_LABEL_PATTERN.match(label))
