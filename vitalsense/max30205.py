"""Driver for the MAX30205 body-temperature sensor on an I2C bus."""

from __future__ import annotations

from enum import IntEnum
from typing import Protocol

ADDRESS = 0x90
"""Default 8-bit bus address of the sensor."""

TEMPERATURE_LSB = 0.00390625
"""Degrees Celsius per count of the temperature register."""

SHUTDOWN_BIT = 0x01
ONE_SHOT_BIT = 0x80


class Register(IntEnum):
    TEMP = 0x00
    CONFIG = 0x01
    THYST = 0x02
    TOS = 0x03


class I2CBus(Protocol):
    """Register-oriented access to devices on an I2C bus."""

    def read_mem(self, address: int, reg: int, size: int) -> bytes: ...

    def write_mem(self, address: int, reg: int, data: bytes) -> None: ...


def decode_temperature(data: bytes) -> float:
    """Convert the two big-endian bytes of the temperature register to degrees C."""
    if len(data) != 2:
        raise ValueError("temperature register holds exactly two bytes")
    raw = int.from_bytes(bytes(data), "big", signed=True)
    return raw * TEMPERATURE_LSB


class Max30205:
    """A MAX30205 sensor reached through an ``I2CBus``."""

    def __init__(self, bus: I2CBus, address: int = ADDRESS) -> None:
        self.bus = bus
        self.address = address

    def _read_byte(self, reg: Register) -> int:
        return self.bus.read_mem(self.address, reg, 1)[0]

    def _write_byte(self, reg: Register, value: int) -> None:
        self.bus.write_mem(self.address, reg, bytes([value & 0xFF]))

    def init(self) -> None:
        """Select the default mode and clear both alarm thresholds."""
        self._write_byte(Register.CONFIG, 0x00)
        self._write_byte(Register.THYST, 0x00)
        self._write_byte(Register.TOS, 0x00)

    def shutdown(self) -> None:
        """Set the shutdown bit, keeping the other configuration bits."""
        config = self._read_byte(Register.CONFIG)
        self._write_byte(Register.CONFIG, config | SHUTDOWN_BIT)

    def one_shot_mode(self) -> None:
        """Shut the sensor down, then request a single conversion."""
        self.shutdown()
        config = self._read_byte(Register.CONFIG)
        self._write_byte(Register.CONFIG, config | ONE_SHOT_BIT)

    def get_temperature(self) -> float:
        """Trigger a one-shot conversion and return the temperature register in C."""
        config = self._read_byte(Register.CONFIG)
        self._write_byte(Register.CONFIG, config | ONE_SHOT_BIT)
        return decode_temperature(self.bus.read_mem(self.address, Register.TEMP, 2))