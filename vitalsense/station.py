"""Measurement loop that reads SpO2 and body temperature, reports and displays them."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from vitalsense.blood import BloodResult

HEADER_TEXT = "max30205_data:"
"""Caption written above each reading on the display."""

TEXT_COLUMN = 2
SETTLE_DELAY_MS = 10
"""Pause between display steps; also paces sampling at roughly 100 Hz."""


class Color(Enum):
    BLACK = 0
    WHITE = 1


class BloodSource(Protocol):
    def read(self) -> BloodResult: ...


class Thermometer(Protocol):
    def get_temperature(self) -> float: ...


class Uart(Protocol):
    def transmit(self, data: bytes) -> None: ...


class Display(Protocol):
    """A text display addressed by pixel column and text row."""

    def fill(self, color: Color) -> None: ...

    def write_string_at(self, text: str, column: int, row: int) -> None: ...

    def update_screen(self) -> None: ...


@dataclass(frozen=True)
class Reading:
    """What one pass of the loop measured and sent."""

    blood: BloodResult
    temperature: float
    spo2_text: str
    temperature_text: str


def format_spo2(spo2: int) -> str:
    """Return the SpO2 line as sent over the serial link."""
    return f"SPO2: {spo2}%\r\n"


def format_temperature(value: float) -> str:
    """Return the temperature line as sent over the serial link."""
    return f"Temperature: {value:.2f}"


def _sleep_ms(ms: int) -> None:
    time.sleep(ms / 1000)


class Station:
    """Ties the pulse oximeter, thermometer, serial link and display together."""

    def __init__(
        self,
        monitor: BloodSource,
        thermometer: Thermometer,
        uart: Uart,
        display: Display,
    ) -> None:
        self.monitor = monitor
        self.thermometer = thermometer
        self.uart = uart
        self.display = display
        self.delay: Callable[[int], None] = _sleep_ms

    def step(self) -> Reading:
        """Run one pass: measure, transmit both lines and redraw the display."""
        self.display.fill(Color.BLACK)
        self.delay(SETTLE_DELAY_MS)
        self.display.write_string_at(HEADER_TEXT, TEXT_COLUMN, 0)

        blood = self.monitor.read()
        spo2_text = format_spo2(blood.spo2)
        self.uart.transmit(spo2_text.encode("ascii"))

        self.delay(SETTLE_DELAY_MS)
        self.display.write_string_at(spo2_text, TEXT_COLUMN, 1)
        self.delay(SETTLE_DELAY_MS)
        self.delay(SETTLE_DELAY_MS)
        self.display.write_string_at(HEADER_TEXT, TEXT_COLUMN, 2)

        temperature = self.thermometer.get_temperature()
        # The sensor reading is reported with its sign inverted.
        temperature_text = format_temperature(-temperature)
        self.uart.transmit(temperature_text.encode("ascii"))
        self.display.write_string_at(temperature_text, TEXT_COLUMN, 3)
        self.display.update_screen()

        return Reading(blood, temperature, spo2_text, temperature_text)

    def run(self, cycles: int | None = None) -> list[Reading]:
        """Repeat ``step``; forever when ``cycles`` is None, else that many times."""
        if cycles is None:
            while True:
                self.step()
        if cycles < 0:
            raise ValueError("cycles must not be negative")
        return [self.step() for _ in range(cycles)]