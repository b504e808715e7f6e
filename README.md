# stepdrive

Stepper motor control with acceleration and deceleration, written against a
small board abstraction: the drivers talk only to a `Board` object, so they
run on the included `SimulatedBoard` or on any object that provides the same
pin and clock operations.

## What is inside

- `stepdrive.board` – the abstract `Board` interface, `PinMode`, and
  `SimulatedBoard`, a board with a virtual microsecond clock that only moves
  when told to (`advance()`, `delay()`, `delay_microseconds()`). It records
  every pin write in `digital_writes` and `analog_writes`, and keeps the
  current `levels`, `analog_values` and `modes` of each pin.
- `stepdrive.phases` – `MotorInterface` (function callbacks, step/direction
  driver, 2/3/4-wire full and half stepping) with `pin_count()` and
  `phase_mask()`, the coil pattern for a given step.
- `stepdrive.stepper` – `AccelStepper`, a stepper controller with target
  positions, accelerating and decelerating speed profiles, constant-speed
  running, stop, enable pin and pin inversion, plus `Direction`.
- `stepdrive.sonar_drive` – `SonarDrive`, which drives two steppers at a speed
  proportional to the distance read from an ultrasonic ranger, together with
  `EchoTimer` and `echo_to_distance()`.
- `stepdrive.rainbow` – `rainbow_cycle()`, the colour sequence of a full
  rainbow fade, and `RgbLed`, which plays it on three PWM pins.

## Installing

```
pip install .
```

## Moving to a position

```python
from stepdrive.board import SimulatedBoard
from stepdrive.phases import MotorInterface
from stepdrive.stepper import AccelStepper

board = SimulatedBoard(start_us=0)
motor = AccelStepper(board, MotorInterface.DRIVER, 16, 17)
motor.max_speed = 1000
motor.acceleration = 500

motor.move_to(200)
while motor.run():
    board.advance(50)

print(motor.current_position)   # 200
```

`run()` makes at most one step per call, when a step is due on the board's
clock; call it often and let time pass between calls. It returns whether the
motor is still heading for its target. `run_to_position()` and
`run_to_new_position()` block until the motor has stopped at its target,
waiting on the board between steps.

Speed, maximum speed, acceleration and minimum pulse width are properties:
`speed`, `max_speed`, `acceleration`, `min_pulse_width`. Positions are read
from `current_position`, `target_position` and `distance_to_go`; use
`set_current_position()` to declare a new position, which also stops the
motor.

For constant-speed running, set `speed` and poll `run_speed()`; use
`run_speed_to_position()` to stop at the target without acceleration.
`stop()` sets a new target that brings the motor to rest as quickly as the
current acceleration allows, and `is_running()` tells whether it is still
moving or short of its target.

A stepper driven by your own callables instead of pins is made with
`AccelStepper.from_functions(board, forward, backward)`.

## Distance-controlled motors

```python
from stepdrive.board import HIGH, LOW, SimulatedBoard
from stepdrive.sonar_drive import SonarDrive

board = SimulatedBoard()
drive = SonarDrive(board, microsteps=16, trigger_every=100)
drive.setup()

drive.echo.on_echo_change(HIGH)
board.advance(1000)
drive.echo.on_echo_change(LOW)   # a 1000 µs echo

for _ in range(100):
    drive.loop()
print(drive.distance)            # 17.15 (cm)
```

Every `trigger_every` passes, `loop()` pulses the trigger pin and turns the
last echo width into a distance; both motors then run at `distance * 100`
steps per second, limited by their maximum speed.

## Rainbow colours

```python
from stepdrive.rainbow import rainbow_cycle

colours = list(rainbow_cycle())
colours[0]     # (255, 0, 0)
len(colours)   # 1536
```

`RgbLed(board).play_cycle(1)` writes the same sequence to PWM pins 3, 5 and
6 (or the pins you pass), waiting the given number of milliseconds between
colours.

## What this package does not do

There is no board implementation for real hardware: `SimulatedBoard` is the
only `Board` provided, and anything else must be supplied by you. Echo edges
are not watched by an interrupt; the caller reports them with
`EchoTimer.on_echo_change()`. There is no command-line program.

## Running the tests

```
pip install .[test]
pytest
```