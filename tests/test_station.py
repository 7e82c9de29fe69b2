import pytest

from vitalsense.blood import BloodMonitor, BloodResult
from vitalsense.station import (
    HEADER_TEXT,
    Color,
    Station,
    format_spo2,
    format_temperature,
)


class FakeSensor:
    def __init__(self, samples):
        self.samples = list(samples)
        self.initialised = False

    def init(self):
        self.initialised = True

    def read_fifo(self):
        return self.samples.pop(0) if self.samples else (1000, 1000)


class FixedMonitor:
    def __init__(self, spo2):
        self.spo2 = spo2
        self.reads = 0

    def read(self):
        self.reads += 1
        return BloodResult(spo2=self.spo2, heart_rate=0, pulse_detected=False, timestamp=self.reads)


class FakeThermometer:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def get_temperature(self):
        self.calls += 1
        return self.value


class FakeUart:
    def __init__(self):
        self.sent = []

    def transmit(self, data):
        self.sent.append(data)


class FakeDisplay:
    def __init__(self):
        self.events = []

    def fill(self, color):
        self.events.append(("fill", color))

    def write_string_at(self, text, column, row):
        self.events.append(("text", text, column, row))

    def update_screen(self):
        self.events.append(("update",))


def make_station(monitor=None, temperature=36.5):
    uart = FakeUart()
    display = FakeDisplay()
    station = Station(monitor or FixedMonitor(98), FakeThermometer(temperature), uart, display)
    station.delay = lambda ms: None
    return station, uart, display


def test_format_spo2_matches_wire_format():
    assert format_spo2(98) == "SPO2: 98%\r\n"


def test_format_temperature_two_decimals():
    assert format_temperature(36.5) == "Temperature: 36.50"


def test_format_temperature_negative():
    assert format_temperature(-1.0) == "Temperature: -1.00"


def test_step_transmits_spo2_then_temperature():
    station, uart, _ = make_station(FixedMonitor(97), temperature=25.0)
    reading = station.step()
    assert uart.sent == [
        format_spo2(97).encode("ascii"),
        format_temperature(-25.0).encode("ascii"),
    ]
    assert reading.spo2_text == format_spo2(97)


def test_step_reports_negated_temperature():
    station, _, _ = make_station(temperature=12.25)
    reading = station.step()
    assert reading.temperature == 12.25
    assert reading.temperature_text == format_temperature(-12.25)


def test_step_display_sequence():
    station, _, display = make_station(FixedMonitor(95), temperature=30.0)
    station.step()
    assert display.events == [
        ("fill", Color.BLACK),
        ("text", HEADER_TEXT, 2, 0),
        ("text", format_spo2(95), 2, 1),
        ("text", HEADER_TEXT, 2, 2),
        ("text", format_temperature(-30.0), 2, 3),
        ("update",),
    ]


def test_step_uses_real_blood_monitor():
    sensor = FakeSensor([(50000, 60000)])
    monitor = BloodMonitor(sensor)
    station, uart, _ = make_station(monitor)
    reading = station.step()
    assert sensor.initialised
    assert reading.blood.timestamp == 1
    assert uart.sent[0] == format_spo2(reading.blood.spo2).encode("ascii")


def test_run_performs_requested_cycles():
    monitor = FixedMonitor(99)
    station, uart, display = make_station(monitor)
    readings = station.run(3)
    assert len(readings) == 3
    assert monitor.reads == 3
    assert len(uart.sent) == 6
    assert display.events.count(("update",)) == 3
    assert [r.blood.timestamp for r in readings] == [1, 2, 3]


def test_run_zero_cycles_does_nothing():
    station, uart, display = make_station()
    assert station.run(0) == []
    assert uart.sent == []
    assert display.events == []


def test_run_rejects_negative_cycles():
    station, _, _ = make_station()
    with pytest.raises(ValueError):
        station.run(-1)


def test_step_waits_between_display_steps():
    station, _, _ = make_station()
    waits = []
    station.delay = waits.append
    station.step()
    assert waits == [10, 10, 10, 10]