# vitalsense

Signal processing and sensor drivers for a small vital-signs station: blood
oxygen saturation (SpO2) and heart rate from a MAX30102 optical sensor, and body
temperature from a MAX30205 thermometer.

The package has no runtime dependencies. The drivers reach the hardware only
through objects you hand them (GPIO pins, an I2C bus, a UART, a display), so the
same code runs against real hardware adapters or against fakes in tests.

## Modules

### `vitalsense.blood`

The SpO2 and heart-rate pipeline, sampling at 100 Hz.

- `BloodMonitor(sensor)` takes any object with `init()` and `read_fifo()`
  (returning a `(red, ir)` pair). It calls `sensor.init()` once when built.
  It keeps a 100-sample window of raw red and infrared readings, smooths them
  with a low-pass filter, removes the baseline with a high-pass filter and
  detects pulse peaks on the red channel. Heart rate is the average of the last
  five beat intervals that fall within 40–220 BPM; SpO2 is recomputed from the
  window every 100 samples.
  - `update(red, ir)` feeds one sample pair.
  - `read()` takes one sample from the sensor, feeds it, and returns a
    `BloodResult` with `spo2`, `heart_rate`, `pulse_detected` and `timestamp`
    (the sample count). The pulse flag is cleared after each read.
  - `reset()` clears the sample counter, beat intervals, filter state and the
    computed SpO2 and heart rate. The sample window contents and the peak
    detector's state are kept.
- `calculate_spo2(red, ir)` applies the ratio-of-ratios formula
  `-45.060·R² + 30.354·R + 94.845` to two equal-length windows, clamped to
  70–100 %. It returns 0 when the signal gives no usable ratio and raises
  `ValueError` for empty or mismatched windows.

### `vitalsense.max30102`

- `SoftI2C(pins, delay)` is a bit-banged I2C master. `pins` provides
  `write_scl(high)`, `write_sda(high)`, `read_sda()`, `sda_input()` and
  `sda_output()`; `delay(us)` defaults to `time.sleep`. Methods: `start()`,
  `stop()`, `send_byte(byte)`, `read_byte(ack)`, `wait_ack()` (True when the
  device acknowledged), `ack()` and `nack()`.
- `Max30102(i2c)` drives the sensor: `init()` resets it, selects SpO2 mode
  (100 Hz, 411 µs pulses, LED current 0x24) and drains the FIFO;
  `read_reg(reg)`, `write_reg(reg, value)`; `read_fifo()` returns an 18-bit
  `(red, ir)` pair; `read_temperature()` returns the die temperature in °C.
- `Register` names the chip's register addresses.

### `vitalsense.max30205`

- `Max30205(bus, address=0x90)` talks to the thermometer through a bus with
  `read_mem(address, reg, size)` and `write_mem(address, reg, data)`.
  `init()` selects the default mode and zeroes both alarm thresholds,
  `shutdown()` sets the shutdown bit, `one_shot_mode()` shuts down and then
  requests a single conversion, and `get_temperature()` requests a conversion
  and returns the temperature register in °C.
- `decode_temperature(data)` turns the two big-endian bytes of the temperature
  register into °C (1/256 °C per count, two's complement).

### `vitalsense.clock`

`ClockRegisters(cr, csr, cfgr, pllcfgr)` is a snapshot of the clock control
registers. `msi_range_frequency(registers)` gives the selected MSI frequency
(raising `ValueError` for an undefined range), and
`system_core_clock(registers)` gives the core clock in Hz for an MSI, HSI, HSE
or PLL system clock after the AHB prescaler.

### `vitalsense.station`

`Station(monitor, thermometer, uart, display)` ties the pieces together. Each
`step()` clears the display, reads one `BloodResult`, sends `format_spo2(spo2)`
(e.g. `"SPO2: 97%\r\n"`) over `uart.transmit(bytes)`, reads the thermometer and
sends `format_temperature(-temperature)` (e.g. `"Temperature: -36.50"`; the
reading is sent with its sign inverted), writes both lines under captions on
the display and refreshes it. It returns a `Reading`. `run(cycles)` repeats
`step()` that many times and returns the readings; with `cycles=None` it runs
forever. The pause between steps is the `delay(ms)` attribute, `time.sleep` by
default.

The display needs `fill(color)`, `write_string_at(text, column, row)` and
`update_screen()`; `Color` holds `BLACK` and `WHITE`.

## Examples

Decoding a temperature register:

```python
from vitalsense.max30205 import decode_temperature

decode_temperature(bytes([0x19, 0x80]))  # 25.5
```

Processing samples you already have:

```python
from vitalsense.blood import calculate_spo2

print(calculate_spo2(red_window, ir_window))
```

Running the station against your own hardware adapters:

```python
from vitalsense.blood import BloodMonitor
from vitalsense.max30102 import Max30102, SoftI2C
from vitalsense.max30205 import Max30205
from vitalsense.station import Station

sensor = Max30102(SoftI2C(pins))
thermometer = Max30205(bus)
thermometer.init()
thermometer.one_shot_mode()

station = Station(BloodMonitor(sensor), thermometer, uart, display)
readings = station.run(100)
```

Here `pins`, `bus`, `uart` and `display` are your adapters for the board the
sensors are wired to.

## What it does not do

The package contains no hardware adapters: no GPIO, I2C bus or UART access and
no display driver or fonts. It has no command-line program either; you build a
`Station` from your own adapters and call it from Python.

## Tests

The test suite uses pytest; install the `test` extra to get it.