"""Stepper motor control with acceleration, deceleration and positioning.

Speeds are in steps per second and positions in steps, positive being
clockwise. A step is made only when the caller polls ``run`` or
``run_speed`` and the step interval has elapsed on the board's clock.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Callable

from stepdrive.board import HIGH, LOW, MICROS_MODULUS, Board, PinMode
from stepdrive.phases import MotorInterface, phase_mask, pin_count

UNUSED_PIN = 0xFF

_US_PER_SECOND = 1_000_000.0


class Direction(enum.IntEnum):
    """Direction the motor is turning."""

    CCW = 0
    CW = 1


def _truncate(value: float) -> int:
    """Convert to an integer the way a C cast does: toward zero."""
    return int(value)


def _interval_us(step_size: float) -> int:
    """Whole microseconds of a step; an infinitely long step means stopped."""
    return _truncate(step_size) if math.isfinite(step_size) else 0


class AccelStepper:
    """One stepper motor, driven through a board, with acceleration support."""

    def __init__(
        self,
        board: Board,
        interface: int = MotorInterface.FULL4WIRE,
        pin1: int = 2,
        pin2: int = 3,
        pin3: int = 4,
        pin4: int = 5,
        enable: bool = True,
    ) -> None:
        self._board = board
        self._interface = MotorInterface(interface)
        self._pins = (pin1, pin2, pin3, pin4)
        self._pin_inverted = [False, False, False, False]
        self._enable_inverted = False
        self._enable_pin: int | None = None
        self._forward: Callable[[], object] | None = None
        self._backward: Callable[[], object] | None = None

        self._current_pos = 0
        self._target_pos = 0
        self._speed = 0.0
        self._max_speed = 0.0
        self._acceleration = 0.0
        self._step_interval = 0
        self._min_pulse_width = 1
        self._last_step_time = 0

        self._n = 0
        self._c0 = 0.0
        self._cn = 0.0
        self._cmin = 1.0
        self._direction = Direction.CCW

        if enable:
            self.enable_outputs()
        self.acceleration = 1.0
        self.max_speed = 1.0

    @classmethod
    def from_functions(
        cls,
        board: Board,
        forward: Callable[[], object],
        backward: Callable[[], object],
    ) -> AccelStepper:
        """Create a stepper that steps by calling ``forward`` or ``backward``."""
        stepper = cls(board, MotorInterface.FUNCTION, 0, 0, 0, 0, False)
        stepper._forward = forward
        stepper._backward = backward
        return stepper

    # Positioning

    def move_to(self, absolute: int) -> None:
        """Set the absolute target position and recompute the speed."""
        if self._target_pos != absolute:
            self._target_pos = absolute
            self.compute_new_speed()

    def move(self, relative: int) -> None:
        """Set the target position relative to the current position."""
        self.move_to(self._current_pos + relative)

    @property
    def distance_to_go(self) -> int:
        """Steps from the current position to the target; positive is clockwise."""
        return self._target_pos - self._current_pos

    @property
    def target_position(self) -> int:
        """The most recently set target position."""
        return self._target_pos

    @property
    def current_position(self) -> int:
        """The current motor position in steps."""
        return self._current_pos

    def set_current_position(self, position: int) -> None:
        """Declare the motor to be at ``position`` now, and stop it."""
        self._target_pos = self._current_pos = position
        self._n = 0
        self._step_interval = 0
        self._speed = 0.0

    # Parameters

    @property
    def max_speed(self) -> float:
        """Maximum permitted speed in steps per second."""
        return self._max_speed

    @max_speed.setter
    def max_speed(self, speed: float) -> None:
        speed = abs(float(speed))
        if self._max_speed != speed:
            self._max_speed = speed
            self._cmin = _US_PER_SECOND / speed if speed else math.inf
            if self._n > 0:
                self._n = _truncate(self._speed * self._speed / (2.0 * self._acceleration))
                self.compute_new_speed()

    @property
    def acceleration(self) -> float:
        """Acceleration and deceleration rate in steps per second squared.

        Setting zero is ignored; a negative value counts as positive.
        """
        return self._acceleration

    @acceleration.setter
    def acceleration(self, acceleration: float) -> None:
        acceleration = float(acceleration)
        if acceleration == 0.0:
            return
        acceleration = abs(acceleration)
        if self._acceleration != acceleration:
            self._n = _truncate(self._n * (self._acceleration / acceleration))
            self._c0 = 0.676 * math.sqrt(2.0 / acceleration) * _US_PER_SECOND
            self._acceleration = acceleration
            self.compute_new_speed()

    @property
    def speed(self) -> float:
        """Current speed in steps per second; setting it is limited by max speed."""
        return self._speed

    @speed.setter
    def speed(self, speed: float) -> None:
        speed = float(speed)
        if speed == self._speed:
            return
        speed = min(max(speed, -self._max_speed), self._max_speed)
        if speed == 0.0:
            self._step_interval = 0
        else:
            self._step_interval = _truncate(abs(_US_PER_SECOND / speed))
            self._direction = Direction.CW if speed > 0.0 else Direction.CCW
        self._speed = speed

    @property
    def min_pulse_width(self) -> int:
        """Width of a driver step pulse in microseconds."""
        return self._min_pulse_width

    @min_pulse_width.setter
    def min_pulse_width(self, width: int) -> None:
        if width < 0:
            raise ValueError(f"pulse width must not be negative: {width}")
        self._min_pulse_width = int(width)

    @property
    def direction(self) -> Direction:
        """Direction of the current or most recent motion."""
        return self._direction

    @property
    def step_interval(self) -> int:
        """Microseconds between steps; zero when stopped."""
        return self._step_interval

    # Running

    def run_speed(self) -> bool:
        """Step once at the constant speed if a step is due; return whether it stepped."""
        if not self._step_interval:
            return False
        now = self._board.micros()
        if (now - self._last_step_time) % MICROS_MODULUS >= self._step_interval:
            if self._direction == Direction.CW:
                self._current_pos += 1
            else:
                self._current_pos -= 1
            self.step(self._current_pos)
            self._last_step_time = now
            return True
        return False

    def run(self) -> bool:
        """Step with acceleration if due; return whether still heading to the target."""
        if self.run_speed():
            self.compute_new_speed()
        return self._speed != 0.0 or self.distance_to_go != 0

    def run_to_position(self) -> None:
        """Block until the target position is reached and the motor has stopped."""
        while self.run():
            self._wait_for_next_step()

    def run_speed_to_position(self) -> bool:
        """Step at constant speed toward the target unless already there."""
        if self._target_pos == self._current_pos:
            return False
        self._direction = (
            Direction.CW if self._target_pos > self._current_pos else Direction.CCW
        )
        return self.run_speed()

    def run_to_new_position(self, position: int) -> None:
        """Set a new target and block until it is reached."""
        self.move_to(position)
        self.run_to_position()

    def stop(self) -> None:
        """Retarget so the motor stops as fast as the acceleration allows."""
        if self._speed != 0.0:
            steps_to_stop = (
                _truncate(self._speed * self._speed / (2.0 * self._acceleration)) + 1
            )
            self.move(steps_to_stop if self._speed > 0 else -steps_to_stop)

    def is_running(self) -> bool:
        """Whether the motor is moving or not yet at its target."""
        return not (self._speed == 0.0 and self._target_pos == self._current_pos)

    def compute_new_speed(self) -> int:
        """Work out the speed for the next step and return the new step interval."""
        distance = self.distance_to_go
        steps_to_stop = _truncate(self._speed * self._speed / (2.0 * self._acceleration))

        if distance == 0 and steps_to_stop <= 1:
            self._step_interval = 0
            self._speed = 0.0
            self._n = 0
            return self._step_interval

        if distance > 0:
            if self._n > 0:
                if steps_to_stop >= distance or self._direction == Direction.CCW:
                    self._n = -steps_to_stop
            elif self._n < 0:
                if steps_to_stop < distance and self._direction == Direction.CW:
                    self._n = -self._n
        elif distance < 0:
            if self._n > 0:
                if steps_to_stop >= -distance or self._direction == Direction.CW:
                    self._n = -steps_to_stop
            elif self._n < 0:
                if steps_to_stop < -distance and self._direction == Direction.CCW:
                    self._n = -self._n

        if self._n == 0:
            self._cn = self._c0
            self._direction = Direction.CW if distance > 0 else Direction.CCW
        else:
            self._cn = self._cn - (2.0 * self._cn) / (4.0 * self._n + 1)
            self._cn = max(self._cn, self._cmin)
        self._n += 1
        self._step_interval = _interval_us(self._cn)
        self._speed = _US_PER_SECOND / self._cn
        if self._direction == Direction.CCW:
            self._speed = -self._speed
        return self._step_interval

    def _wait_for_next_step(self) -> None:
        if not self._step_interval:
            return
        elapsed = (self._board.micros() - self._last_step_time) % MICROS_MODULUS
        if elapsed < self._step_interval:
            self._board.delay_microseconds(self._step_interval - elapsed)

    # Outputs

    def set_output_pins(self, mask: int) -> None:
        """Drive the motor pins from ``mask``: bit 0 is pin 1, bit 1 is pin 2."""
        for index in range(pin_count(self._interface)):
            level = HIGH if mask & (1 << index) else LOW
            self._board.digital_write(self._pins[index], level ^ self._pin_inverted[index])

    def step(self, step: int) -> None:
        """Make one step; ``step`` is the new position, which selects the phase."""
        if self._interface == MotorInterface.FUNCTION:
            self._step_function()
        elif self._interface == MotorInterface.DRIVER:
            self._step_driver()
        else:
            mask = phase_mask(self._interface, step)
            if mask is not None:
                self.set_output_pins(mask)

    def _step_function(self) -> None:
        callback = self._forward if self._speed > 0 else self._backward
        if callback is None:
            raise RuntimeError("function interface stepper has no step callables")
        callback()

    def _step_driver(self) -> None:
        clockwise = self._direction == Direction.CW
        # Direction first, else the driver may see a rogue pulse.
        self.set_output_pins(0b10 if clockwise else 0b00)
        self.set_output_pins(0b11 if clockwise else 0b01)
        self._board.delay_microseconds(self._min_pulse_width)
        self.set_output_pins(0b10 if clockwise else 0b00)

    def step_forward(self) -> int:
        """Make one clockwise step now and return the new position."""
        self._current_pos += 1
        self.step(self._current_pos)
        self._last_step_time = self._board.micros()
        return self._current_pos

    def step_backward(self) -> int:
        """Make one anticlockwise step now and return the new position."""
        self._current_pos -= 1
        self.step(self._current_pos)
        self._last_step_time = self._board.micros()
        return self._current_pos

    def disable_outputs(self) -> None:
        """Set all motor pins low and switch the enable pin off."""
        if self._interface == MotorInterface.FUNCTION:
            return
        self.set_output_pins(0)
        if self._enable_pin is not None:
            self._board.pin_mode(self._enable_pin, PinMode.OUTPUT)
            self._board.digital_write(self._enable_pin, LOW ^ self._enable_inverted)

    def enable_outputs(self) -> None:
        """Make the motor pins outputs and switch the enable pin on."""
        if self._interface == MotorInterface.FUNCTION:
            return
        for pin in self._pins[: pin_count(self._interface)]:
            self._board.pin_mode(pin, PinMode.OUTPUT)
        if self._enable_pin is not None:
            self._board.pin_mode(self._enable_pin, PinMode.OUTPUT)
            self._board.digital_write(self._enable_pin, HIGH ^ self._enable_inverted)

    def set_enable_pin(self, enable_pin: int | None = None) -> None:
        """Use ``enable_pin`` as the driver enable line; ``None`` or 0xFF means none."""
        self._enable_pin = None if enable_pin in (None, UNUSED_PIN) else enable_pin
        if self._enable_pin is not None:
            self._board.pin_mode(self._enable_pin, PinMode.OUTPUT)
            self._board.digital_write(self._enable_pin, HIGH ^ self._enable_inverted)

    def set_pins_inverted(
        self,
        direction_invert: bool = False,
        step_invert: bool = False,
        enable_invert: bool = False,
    ) -> None:
        """Set inversion of the driver step, direction and enable pins."""
        self._pin_inverted[0] = bool(step_invert)
        self._pin_inverted[1] = bool(direction_invert)
        self._enable_inverted = bool(enable_invert)

    def set_all_pins_inverted(
        self,
        pin1_invert: bool,
        pin2_invert: bool,
        pin3_invert: bool,
        pin4_invert: bool,
        enable_invert: bool,
    ) -> None:
        """Set inversion of each of the four motor pins and the enable pin."""
        self._pin_inverted = [
            bool(pin1_invert),
            bool(pin2_invert),
            bool(pin3_invert),
            bool(pin4_invert),
        ]
        self._enable_inverted = bool(enable_invert)