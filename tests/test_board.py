import pytest

from stepdrive.board import (
    HIGH,
    LOW,
    MICROS_MODULUS,
    PinMode,
    PinWrite,
    SimulatedBoard,
)


def test_clock_starts_at_given_time():
    board = SimulatedBoard(start_us=500)
    assert board.micros() == 500


def test_default_start_is_zero():
    assert SimulatedBoard().micros() == 0


def test_advance_moves_clock():
    board = SimulatedBoard()
    board.advance(1234)
    board.advance(6)
    assert board.micros() == 1240


def test_delay_counts_milliseconds():
    board = SimulatedBoard()
    board.delay(3)
    assert board.micros() == 3 * 1000


def test_delay_microseconds_counts_microseconds():
    board = SimulatedBoard(start_us=10)
    board.delay_microseconds(2)
    board.delay_microseconds(10)
    assert board.micros() == 22


def test_micros_wraps_at_32_bits():
    board = SimulatedBoard(start_us=MICROS_MODULUS - 5)
    board.advance(8)
    assert board.micros() == 3


@pytest.mark.parametrize("call", ["advance", "delay", "delay_microseconds"])
def test_negative_durations_are_rejected(call):
    board = SimulatedBoard()
    with pytest.raises(ValueError):
        getattr(board, call)(-1)
    assert board.micros() == 0


def test_negative_start_is_rejected():
    with pytest.raises(ValueError):
        SimulatedBoard(start_us=-1)


def test_pin_mode_is_recorded():
    board = SimulatedBoard()
    board.pin_mode(5, PinMode.OUTPUT)
    board.pin_mode(18, PinMode.INPUT)
    assert board.modes == {5: PinMode.OUTPUT, 18: PinMode.INPUT}


def test_digital_write_read_round_trip():
    board = SimulatedBoard()
    board.digital_write(17, HIGH)
    assert board.digital_read(17) == HIGH
    board.digital_write(17, LOW)
    assert board.digital_read(17) == LOW


def test_unwritten_pin_reads_low():
    assert SimulatedBoard().digital_read(9) == LOW


def test_digital_write_accepts_bool():
    board = SimulatedBoard()
    board.digital_write(2, True)
    assert board.digital_read(2) == HIGH


def test_digital_write_rejects_other_levels():
    board = SimulatedBoard()
    with pytest.raises(ValueError):
        board.digital_write(2, 2)
    assert board.digital_writes == []


def test_digital_writes_are_time_stamped():
    board = SimulatedBoard()
    board.digital_write(16, HIGH)
    board.delay_microseconds(1)
    board.digital_write(16, LOW)
    assert board.digital_writes == [
        PinWrite(0, 16, HIGH),
        PinWrite(1, 16, LOW),
    ]


def test_analog_write_records_value():
    board = SimulatedBoard()
    board.analog_write(3, 255)
    board.analog_write(5, 0)
    assert board.analog_values == {3: 255, 5: 0}
    assert [w.value for w in board.analog_writes] == [255, 0]


@pytest.mark.parametrize("value", [-1, 256])
def test_analog_write_rejects_out_of_range(value):
    board = SimulatedBoard()
    with pytest.raises(ValueError):
        board.analog_write(3, value)
    assert board.analog_values == {}