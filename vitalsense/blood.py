"""Blood-oxygen and heart-rate estimation from red/infrared PPG samples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

SAMPLE_RATE = 100
"""Sampling rate in Hz."""

BUFFER_SIZE = 100
"""Number of raw samples kept for the SpO2 estimate."""

MIN_SPO2 = 70
MAX_SPO2 = 100

_INTERVAL_SLOTS = 5
_SPO2_PERIOD = 100
_LOW_PASS_ALPHA = 0.2
_HIGH_PASS_ALPHA = 0.95
_UINT32_MASK = 0xFFFFFFFF

_MIN_INTERVAL = SAMPLE_RATE * 60 // 220  # 220 BPM upper bound
_MAX_INTERVAL = SAMPLE_RATE * 60 // 40  # 40 BPM lower bound


class PulseSensor(Protocol):
    """A sensor that delivers one red and one infrared sample per read."""

    def init(self) -> None: ...

    def read_fifo(self) -> tuple[int, int]: ...


@dataclass(frozen=True)
class BloodResult:
    """One measurement as reported to the caller."""

    spo2: int
    heart_rate: int
    pulse_detected: bool
    timestamp: int


def _low_pass(value: float, previous: float, alpha: float) -> float:
    return alpha * value + (1.0 - alpha) * previous


def calculate_spo2(red: Sequence[int], ir: Sequence[int]) -> int:
    """Estimate SpO2 in percent from equal-length red and infrared sample windows.

    Returns 0 when the signal gives no usable ratio; otherwise the result is
    clamped to ``MIN_SPO2..MAX_SPO2``.
    """
    if len(red) != len(ir):
        raise ValueError("red and infrared windows must have the same length")
    if not red:
        raise ValueError("sample windows must not be empty")

    size = len(red)
    red_ac = float(max(red) - min(red))
    red_dc = sum(red) / size
    ir_ac = float(max(ir) - min(ir))
    ir_dc = sum(ir) / size

    if red_dc <= 0 or ir_dc <= 0 or ir_ac <= 0:
        return 0

    ratio = (red_ac / red_dc) / (ir_ac / ir_dc)
    spo2 = -45.060 * ratio * ratio + 30.354 * ratio + 94.845
    spo2 = min(max(spo2, MIN_SPO2), MAX_SPO2)
    return int(spo2)


class BloodMonitor:
    """Filters sensor samples and tracks SpO2 and heart rate."""

    def __init__(self, sensor: PulseSensor) -> None:
        self._sensor = sensor
        # Window contents, the interval slot cursor and the peak tracker
        # survive a reset; everything else is cleared by reset().
        self._red_buffer = [0] * BUFFER_SIZE
        self._ir_buffer = [0] * BUFFER_SIZE
        self._interval_index = 0
        self._peak_value = 0.0
        self._peak_state = 0
        sensor.init()
        self.reset()

    def reset(self) -> None:
        """Clear counters, filter state and the computed values."""
        self._buffer_index = 0
        self._sample_count = 0
        self._last_pulse_time = 0
        self._pulse_intervals = [0] * _INTERVAL_SLOTS

        self._filtered_red = 0.0
        self._filtered_ir = 0.0
        self._high_pass_red = 0.0
        self._high_pass_ir = 0.0
        self._prev_red = 0.0
        self._prev_ir = 0.0
        self._prev_red_hp = 0.0
        self._prev_ir_hp = 0.0

        self._spo2 = 0
        self._heart_rate = 0
        self._pulse_detected = False

    def _detect_peak(self, signal: float, threshold: float) -> bool:
        is_peak = False
        if self._peak_state == 0:
            if signal > self._prev_red_hp:
                self._peak_state = 1
                self._peak_value = signal
        elif self._peak_state == 1:
            if signal > self._peak_value:
                self._peak_value = signal
            else:
                self._peak_state = 2
        elif signal < threshold:
            is_peak = True
            self._peak_state = 0
        self._prev_red_hp = signal
        return is_peak

    def _heart_rate_at(self, now: int) -> int:
        interval = (now - self._last_pulse_time) & _UINT32_MASK
        self._last_pulse_time = now
        if not _MIN_INTERVAL <= interval <= _MAX_INTERVAL:
            return self._heart_rate

        self._pulse_intervals[self._interval_index] = interval
        self._interval_index = (self._interval_index + 1) % _INTERVAL_SLOTS

        valid = [value for value in self._pulse_intervals if value > 0]
        if valid:
            average = sum(valid) // len(valid)
            self._heart_rate = int(SAMPLE_RATE * 60.0 / average) & 0xFF
        return self._heart_rate

    def update(self, red: int, ir: int) -> None:
        """Feed one raw red/infrared sample pair through the pipeline."""
        self._red_buffer[self._buffer_index] = red
        self._ir_buffer[self._buffer_index] = ir
        self._buffer_index = (self._buffer_index + 1) % BUFFER_SIZE

        self._filtered_red = _low_pass(float(red), self._filtered_red, _LOW_PASS_ALPHA)
        self._filtered_ir = _low_pass(float(ir), self._filtered_ir, _LOW_PASS_ALPHA)

        self._high_pass_red = _HIGH_PASS_ALPHA * (
            self._prev_red_hp + self._filtered_red - self._prev_red
        )
        self._prev_red = self._filtered_red
        self._prev_red_hp = self._high_pass_red

        self._high_pass_ir = _HIGH_PASS_ALPHA * (
            self._prev_ir_hp + self._filtered_ir - self._prev_ir
        )
        self._prev_ir = self._filtered_ir
        self._prev_ir_hp = self._high_pass_ir

        threshold = 0.5 * abs(self._high_pass_red)
        is_peak = self._detect_peak(self._high_pass_red, threshold)

        self._sample_count = (self._sample_count + 1) & _UINT32_MASK
        if is_peak:
            self._heart_rate = self._heart_rate_at(self._sample_count)
            self._pulse_detected = True

        if self._sample_count % _SPO2_PERIOD == 0:
            self._spo2 = calculate_spo2(self._red_buffer, self._ir_buffer)

    def read(self) -> BloodResult:
        """Take one sample from the sensor and return the current figures."""
        red, ir = self._sensor.read_fifo()
        self.update(red, ir)
        result = BloodResult(
            spo2=self._spo2,
            heart_rate=self._heart_rate,
            pulse_detected=self._pulse_detected,
            timestamp=self._sample_count,
        )
        self._pulse_detected = False
        return result