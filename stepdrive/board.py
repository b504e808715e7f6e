"""Hardware access layer: the pin and timing calls that drivers rely on.

``Board`` is the interface that motor and LED drivers talk to. ``SimulatedBoard``
implements it in memory with a virtual microsecond clock. That makes the
drivers usable and testable without real hardware.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass

LOW = 0
HIGH = 1

# micros() on the target is an unsigned 32-bit counter that wraps around.
MICROS_MODULUS = 1 << 32

ANALOG_MAX = 255


class PinMode(enum.Enum):
    """Electrical mode of a digital pin."""

    INPUT = "input"
    OUTPUT = "output"
    INPUT_PULLUP = "input_pullup"


class Board(ABC):
    """Pin I/O and timing primitives of a microcontroller board."""

    @abstractmethod
    def pin_mode(self, pin: int, mode: PinMode) -> None:
        """Configure ``pin`` for input or output."""

    @abstractmethod
    def digital_write(self, pin: int, value: int) -> None:
        """Drive ``pin`` to ``HIGH`` or ``LOW``."""

    @abstractmethod
    def digital_read(self, pin: int) -> int:
        """Return the level of ``pin``, ``HIGH`` or ``LOW``."""

    @abstractmethod
    def analog_write(self, pin: int, value: int) -> None:
        """Write a PWM duty value between 0 and 255 to ``pin``."""

    @abstractmethod
    def micros(self) -> int:
        """Return microseconds since start, wrapping at 2**32."""

    @abstractmethod
    def delay_microseconds(self, us: int) -> None:
        """Block for ``us`` microseconds."""

    @abstractmethod
    def delay(self, ms: int) -> None:
        """Block for ``ms`` milliseconds."""


@dataclass(frozen=True)
class PinWrite:
    """One recorded write to a pin, stamped with the virtual time."""

    time_us: int
    pin: int
    value: int


def _check_duration(value: int, unit: str) -> None:
    if value < 0:
        raise ValueError(f"duration must not be negative: {value} {unit}")


class SimulatedBoard(Board):
    """An in-memory board with a virtual clock that only moves when told to."""

    def __init__(self, start_us: int = 0) -> None:
        _check_duration(start_us, "us")
        self._now_us = start_us
        self.modes: dict[int, PinMode] = {}
        self.levels: dict[int, int] = {}
        self.analog_values: dict[int, int] = {}
        self.digital_writes: list[PinWrite] = []
        self.analog_writes: list[PinWrite] = []

    def pin_mode(self, pin: int, mode: PinMode) -> None:
        self.modes[pin] = PinMode(mode)

    def digital_write(self, pin: int, value: int) -> None:
        level = int(value)
        if level not in (LOW, HIGH):
            raise ValueError(f"digital level must be LOW or HIGH, got {value!r}")
        self.levels[pin] = level
        self.digital_writes.append(PinWrite(self._now_us, pin, level))

    def digital_read(self, pin: int) -> int:
        return self.levels.get(pin, LOW)

    def analog_write(self, pin: int, value: int) -> None:
        duty = int(value)
        if not 0 <= duty <= ANALOG_MAX:
            raise ValueError(f"analog value must be within 0..{ANALOG_MAX}, got {value!r}")
        self.analog_values[pin] = duty
        self.analog_writes.append(PinWrite(self._now_us, pin, duty))

    def micros(self) -> int:
        return self._now_us % MICROS_MODULUS

    def delay_microseconds(self, us: int) -> None:
        self.advance(us)

    def delay(self, ms: int) -> None:
        _check_duration(ms, "ms")
        self.advance(ms * 1000)

    def advance(self, us: int) -> None:
        """Move the virtual clock forward by ``us`` microseconds."""
        _check_duration(us, "us")
        self._now_us += us