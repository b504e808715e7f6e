"""Motor interface kinds and the coil energising patterns they step through."""

from __future__ import annotations

import enum


class MotorInterface(enum.IntEnum):
    """How a stepper motor is wired to the board."""

    FUNCTION = 0
    """Steps are made by user-supplied forward and backward callables."""
    DRIVER = 1
    """A step/direction driver chip: pin 1 is step, pin 2 is direction."""
    FULL2WIRE = 2
    """Two-wire stepper, full steps."""
    FULL3WIRE = 3
    """Three-wire stepper such as a disk spindle, full steps."""
    FULL4WIRE = 4
    """Four-wire stepper, full steps."""
    HALF3WIRE = 6
    """Three-wire stepper, half steps."""
    HALF4WIRE = 8
    """Four-wire stepper, half steps."""


_FULL2WIRE_MASKS = (0b10, 0b11, 0b01, 0b00)
_FULL3WIRE_MASKS = (0b100, 0b001, 0b010)
_FULL4WIRE_MASKS = (0b0101, 0b0110, 0b1010, 0b1001)
_HALF3WIRE_MASKS = (0b100, 0b101, 0b001, 0b011, 0b010, 0b110)
_HALF4WIRE_MASKS = (
    0b0001,
    0b0101,
    0b0100,
    0b0110,
    0b0010,
    0b1010,
    0b1000,
    0b1001,
)

# Interfaces whose phase is taken from the low bits of the step number.
_MASKED_TABLES = {
    MotorInterface.FULL2WIRE: _FULL2WIRE_MASKS,
    MotorInterface.FULL4WIRE: _FULL4WIRE_MASKS,
    MotorInterface.HALF4WIRE: _HALF4WIRE_MASKS,
}

# Interfaces whose phase is the truncated remainder of the step number.
_REMAINDER_TABLES = {
    MotorInterface.FULL3WIRE: _FULL3WIRE_MASKS,
    MotorInterface.HALF3WIRE: _HALF3WIRE_MASKS,
}


def pin_count(interface: int) -> int:
    """Return how many output pins the interface drives."""
    kind = MotorInterface(interface)
    if kind in (MotorInterface.FULL4WIRE, MotorInterface.HALF4WIRE):
        return 4
    if kind in (MotorInterface.FULL3WIRE, MotorInterface.HALF3WIRE):
        return 3
    return 2


def phase_mask(interface: int, step: int) -> int | None:
    """Return the output pin mask for ``step`` on a coil-driving interface.

    Bit 0 of the mask is pin 1, bit 1 is pin 2 and so on. Three-wire
    interfaces select their phase by a remainder that keeps the sign of
    ``step``, so a negative step that is not a whole number of cycles has no
    phase and yields ``None``: the outputs are left as they were.

    Raises ``ValueError`` for an unknown interface and for the function and
    driver interfaces, which do not energise coils by phase.
    """
    kind = MotorInterface(interface)
    table = _MASKED_TABLES.get(kind)
    if table is not None:
        return table[step & (len(table) - 1)]
    table = _REMAINDER_TABLES.get(kind)
    if table is not None:
        remainder = abs(step) % len(table)
        if step < 0 and remainder:
            return None
        return table[remainder]
    raise ValueError(f"{kind.name} interface has no coil phase sequence")