"""Two stepper motors whose speed follows an ultrasonic distance reading.

An ultrasonic ranger is pinged every ``trigger_every`` loop passes. The
length of its echo pulse gives the distance to the nearest object, and both
motors then run at a constant speed proportional to that distance.
"""

from __future__ import annotations

from stepdrive.board import HIGH, LOW, MICROS_MODULUS, Board, PinMode
from stepdrive.phases import MotorInterface
from stepdrive.stepper import AccelStepper

DIR_PIN1 = 17
STEP_PIN1 = 16
DIR_PIN2 = 25
STEP_PIN2 = 26
TRIG_PIN = 5
ECHO_PIN = 18

DEFAULT_MICROSTEPS = 16
DEFAULT_TRIGGER_EVERY = 50_000

# Speed of sound in centimetres per microsecond.
SOUND_CM_PER_US = 0.0343

# Full steps per second per unit of speed, before microstepping.
_MAX_FULL_STEP_SPEED = 600
_FULL_STEP_ACCELERATION = 30
# Motor speed in steps per second for each centimetre of distance.
SPEED_PER_CM = 100

_STARTUP_DELAY_MS = 1000
_TRIGGER_SETTLE_US = 2
_TRIGGER_PULSE_US = 10


def echo_to_distance(duration_us: float) -> float:
    """Return the distance in centimetres for an echo of ``duration_us``.

    The pulse covers the way there and back, so half of it is used.
    """
    return duration_us * SOUND_CM_PER_US / 2


class EchoTimer:
    """Measures the width of the echo pulse from edge notifications."""

    def __init__(self, board: Board) -> None:
        self.board = board
        self.duration_us = 0
        self.start_us = 0

    def on_echo_change(self, level: int) -> None:
        """Record an edge on the echo line; ``level`` is its new level."""
        if level == HIGH:
            self.start_us = self.board.micros()
        else:
            self.duration_us = (self.board.micros() - self.start_us) % MICROS_MODULUS
            self.start_us = 0


class SonarDrive:
    """Drives two steppers at a speed set by the measured distance."""

    def __init__(
        self,
        board: Board,
        microsteps: int = DEFAULT_MICROSTEPS,
        trigger_every: int = DEFAULT_TRIGGER_EVERY,
    ) -> None:
        if microsteps <= 0:
            raise ValueError(f"microsteps must be positive: {microsteps}")
        if trigger_every <= 0:
            raise ValueError(f"trigger_every must be positive: {trigger_every}")
        self.board = board
        self.microsteps = microsteps
        self.trigger_every = trigger_every
        self.motor1 = AccelStepper(board, MotorInterface.DRIVER, STEP_PIN1, DIR_PIN1)
        self.motor2 = AccelStepper(board, MotorInterface.DRIVER, STEP_PIN2, DIR_PIN2)
        self.echo = EchoTimer(board)
        self.cycle_count = 0
        self.distance = 0.0

    @property
    def motors(self) -> tuple[AccelStepper, AccelStepper]:
        """Both motors, first and second."""
        return (self.motor1, self.motor2)

    def setup(self) -> None:
        """Configure the ranger pins and the motors' speed limits."""
        self.board.delay(_STARTUP_DELAY_MS)
        self.board.pin_mode(TRIG_PIN, PinMode.OUTPUT)
        self.board.pin_mode(ECHO_PIN, PinMode.INPUT)
        for motor in self.motors:
            motor.max_speed = _MAX_FULL_STEP_SPEED * self.microsteps
            motor.acceleration = _FULL_STEP_ACCELERATION * self.microsteps
            motor.speed = 0

    def trigger(self) -> float:
        """Ping the ranger, update the distance from the last echo and return it."""
        self.board.digital_write(TRIG_PIN, LOW)
        self.board.delay_microseconds(_TRIGGER_SETTLE_US)
        self.board.digital_write(TRIG_PIN, HIGH)
        self.board.delay_microseconds(_TRIGGER_PULSE_US)
        self.board.digital_write(TRIG_PIN, LOW)
        self.distance = echo_to_distance(self.echo.duration_us)
        return self.distance

    def loop(self) -> tuple[bool, bool]:
        """Run one pass of the control loop; return whether each motor stepped."""
        self.cycle_count += 1
        if self.cycle_count >= self.trigger_every:
            self.trigger()
            self.cycle_count = 0
        speed = self.distance * SPEED_PER_CM
        for motor in self.motors:
            motor.speed = speed
        return (self.motor1.run_speed(), self.motor2.run_speed())