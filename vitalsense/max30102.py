"""Bit-banged I2C master and driver for the MAX30102 pulse-oximetry sensor."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Callable, Protocol

WRITE_ADDRESS = 0xAE
"""8-bit bus address with the write bit clear."""

READ_ADDRESS = 0xAF
"""8-bit bus address with the read bit set."""

SAMPLE_MASK = 0x03FFFF
"""FIFO samples carry 18 significant bits."""

RESET_DELAY_US = 10_000
FIFO_DEPTH = 16

MODE_RESET = 0x40
MODE_TEMPERATURE = 0x02
MODE_SPO2 = 0x03


class Register(IntEnum):
    INTR1 = 0x00
    INTR2 = 0x01
    INTR_ENABLE1 = 0x02
    INTR_ENABLE2 = 0x03
    FIFO_WR = 0x04
    FIFO_OV = 0x05
    FIFO_RD = 0x06
    FIFO_DATA = 0x07
    FIFO_CFG = 0x08
    MODE_CFG = 0x09
    SPO2_CFG = 0x0A
    LED1_PA = 0x0C
    LED2_PA = 0x0D
    MULTILED1 = 0x11
    MULTILED2 = 0x12
    TEMP_INT = 0x1F
    TEMP_FRAC = 0x20
    TEMP_CFG = 0x21
    REV_ID = 0xFE
    PART_ID = 0xFF


class I2CPins(Protocol):
    """The two open-drain lines of a software I2C bus."""

    def write_scl(self, high: bool) -> None: ...

    def write_sda(self, high: bool) -> None: ...

    def read_sda(self) -> bool: ...

    def sda_input(self) -> None: ...

    def sda_output(self) -> None: ...


def _sleep_us(us: int) -> None:
    time.sleep(us / 1_000_000)


class SoftI2C:
    """An I2C master that drives SCL and SDA by hand."""

    def __init__(self, pins: I2CPins, delay: Callable[[int], None] = _sleep_us) -> None:
        self.pins = pins
        self.delay = delay
        # Both lines idle high.
        pins.write_scl(True)
        pins.write_sda(True)

    def start(self) -> None:
        """Pull SDA low while SCL is high."""
        self.pins.write_sda(True)
        self.pins.write_scl(True)
        self.delay(4)
        self.pins.write_sda(False)
        self.delay(4)
        self.pins.write_scl(False)

    def stop(self) -> None:
        """Release SDA while SCL is high."""
        self.pins.write_scl(False)
        self.pins.write_sda(False)
        self.delay(4)
        self.pins.write_scl(True)
        self.delay(4)
        self.pins.write_sda(True)
        self.delay(4)

    def _clock_pulse(self) -> None:
        self.pins.write_scl(True)
        self.delay(2)
        self.pins.write_scl(False)
        self.delay(2)

    def send_byte(self, byte: int) -> None:
        """Shift out eight bits, most significant first."""
        for shift in range(7, -1, -1):
            self.pins.write_sda(bool((byte >> shift) & 1))
            self.delay(2)
            self._clock_pulse()

    def read_byte(self, ack: bool) -> int:
        """Shift in eight bits, then answer with ACK if ``ack`` else NACK."""
        self.pins.sda_input()
        value = 0
        for _ in range(8):
            value <<= 1
            self.pins.write_scl(True)
            self.delay(2)
            if self.pins.read_sda():
                value |= 1
            self.pins.write_scl(False)
            self.delay(2)
        self.pins.sda_output()

        if ack:
            self.ack()
        else:
            self.nack()
        return value

    def wait_ack(self) -> bool:
        """Clock the acknowledge bit; True when the device pulled SDA low."""
        self.pins.sda_input()
        self.pins.write_scl(True)
        self.delay(2)
        line_high = self.pins.read_sda()
        self.pins.write_scl(False)
        self.delay(2)
        self.pins.sda_output()
        return not line_high

    def ack(self) -> None:
        """Hold SDA low for one clock."""
        self.pins.write_sda(False)
        self.delay(2)
        self._clock_pulse()
        self.pins.write_sda(True)

    def nack(self) -> None:
        """Leave SDA high for one clock."""
        self.pins.write_sda(True)
        self.delay(2)
        self._clock_pulse()


class Max30102:
    """A MAX30102 sensor reached through a ``SoftI2C`` master."""

    def __init__(self, i2c: SoftI2C) -> None:
        self.i2c = i2c

    def _address_register(self, reg: int) -> None:
        self.i2c.start()
        self.i2c.send_byte(WRITE_ADDRESS)
        self.i2c.wait_ack()
        self.i2c.send_byte(reg)
        self.i2c.wait_ack()
        self.i2c.start()
        self.i2c.send_byte(READ_ADDRESS)
        self.i2c.wait_ack()

    def init(self) -> None:
        """Reset the chip, configure SpO2 mode and drain the FIFO."""
        self.write_reg(Register.MODE_CFG, MODE_RESET)
        self.i2c.delay(RESET_DELAY_US)

        self.read_reg(Register.INTR1)
        self.read_reg(Register.INTR2)

        self.write_reg(Register.FIFO_CFG, 0x00)
        self.write_reg(Register.MODE_CFG, MODE_SPO2)
        # 100 Hz, 16384 nA full scale, 411 us pulse width.
        self.write_reg(Register.SPO2_CFG, 0x27)
        self.write_reg(Register.LED1_PA, 0x24)
        self.write_reg(Register.LED2_PA, 0x24)
        self.write_reg(Register.MULTILED1, 0x00)

        for _ in range(FIFO_DEPTH):
            self.read_fifo()

    def read_reg(self, reg: int) -> int:
        """Return the value of one register."""
        self._address_register(reg)
        value = self.i2c.read_byte(False)
        self.i2c.stop()
        return value

    def write_reg(self, reg: int, value: int) -> None:
        """Store one byte in a register."""
        self.i2c.start()
        self.i2c.send_byte(WRITE_ADDRESS)
        self.i2c.wait_ack()
        self.i2c.send_byte(reg)
        self.i2c.wait_ack()
        self.i2c.send_byte(value & 0xFF)
        self.i2c.wait_ack()
        self.i2c.stop()

    def read_fifo(self) -> tuple[int, int]:
        """Read one red and one infrared sample from the FIFO."""
        self._address_register(Register.FIFO_DATA)
        acks = (True, True, True, True, True, False)
        data = bytes(self.i2c.read_byte(ack) for ack in acks)
        self.i2c.stop()
        red = int.from_bytes(data[:3], "big") & SAMPLE_MASK
        ir = int.from_bytes(data[3:], "big") & SAMPLE_MASK
        return red, ir

    def read_temperature(self) -> float:
        """Measure the die temperature in degrees C and return to SpO2 mode."""
        self.write_reg(Register.MODE_CFG, MODE_TEMPERATURE)
        self.i2c.delay(RESET_DELAY_US)
        integer = self.read_reg(Register.TEMP_INT)
        fraction = self.read_reg(Register.TEMP_FRAC)
        self.write_reg(Register.MODE_CFG, MODE_SPO2)
        return float(integer) + fraction / 4.0