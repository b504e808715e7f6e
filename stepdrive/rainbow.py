"""RGB LED colour fading through the hue circle."""

from __future__ import annotations

from collections.abc import Iterator

from stepdrive.board import Board, PinMode

DEFAULT_RED_PIN = 3
DEFAULT_GREEN_PIN = 5
DEFAULT_BLUE_PIN = 6

_LEVELS = 256
_FULL = _LEVELS - 1

Color = tuple[int, int, int]


def rainbow_cycle() -> Iterator[Color]:
    """Yield the colours of one rainbow cycle as ``(r, g, b)`` tuples.

    Six ramps of 256 steps each: red to yellow, yellow to green, green to
    cyan, cyan to blue, blue to magenta and magenta back to red.
    """
    ramps = (
        lambda i: (_FULL, i, 0),
        lambda i: (_FULL - i, _FULL, 0),
        lambda i: (0, _FULL, i),
        lambda i: (0, _FULL - i, _FULL),
        lambda i: (i, 0, _FULL),
        lambda i: (_FULL, 0, _FULL - i),
    )
    for ramp in ramps:
        for i in range(_LEVELS):
            yield ramp(i)


class RgbLed:
    """A common-cathode RGB LED driven by three PWM pins."""

    def __init__(
        self,
        board: Board,
        red_pin: int = DEFAULT_RED_PIN,
        green_pin: int = DEFAULT_GREEN_PIN,
        blue_pin: int = DEFAULT_BLUE_PIN,
    ) -> None:
        self.board = board
        self.pins = (red_pin, green_pin, blue_pin)
        for pin in self.pins:
            board.pin_mode(pin, PinMode.OUTPUT)

    def set(self, r: int, g: int, b: int) -> None:
        """Show the colour ``(r, g, b)``, each channel 0 to 255."""
        for pin, value in zip(self.pins, (r, g, b)):
            self.board.analog_write(pin, value)

    def play_cycle(self, delay_ms: int = 1) -> None:
        """Fade through one rainbow cycle, holding each colour ``delay_ms``."""
        for color in rainbow_cycle():
            self.set(*color)
            self.board.delay(delay_ms)