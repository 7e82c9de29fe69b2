"""SpO2, heart rate and body temperature from MAX30102 and MAX30205 sensors."""

__version__ = "0.1.0"

__all__ = ["blood", "clock", "max30102", "max30205", "station"]