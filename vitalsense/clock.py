"""Core clock frequency derived from the reset and clock control registers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

HSE_VALUE = 8_000_000
"""Frequency of the external high-speed oscillator in Hz."""

MSI_VALUE = 4_000_000
"""Default frequency of the multi-speed internal oscillator in Hz."""

HSI_VALUE = 16_000_000
"""Frequency of the internal high-speed oscillator in Hz."""

AHB_PRESCALER_SHIFTS = (0, 0, 0, 0, 0, 0, 0, 0, 1, 2, 3, 4, 6, 7, 8, 9)
APB_PRESCALER_SHIFTS = (0, 0, 0, 0, 1, 2, 3, 4)
MSI_RANGES = (
    100_000,
    200_000,
    400_000,
    800_000,
    1_000_000,
    2_000_000,
    4_000_000,
    8_000_000,
    16_000_000,
    24_000_000,
    32_000_000,
    48_000_000,
)

CR_MSIRGSEL = 0x0000_0008
CR_MSIRANGE = 0x0000_00F0
CSR_MSISRANGE = 0x0000_0F00
CFGR_SWS = 0x0000_000C
CFGR_HPRE = 0x0000_00F0
PLLCFGR_PLLSRC = 0x0000_0003
PLLCFGR_PLLM = 0x0000_0070
PLLCFGR_PLLN = 0x0000_7F00
PLLCFGR_PLLR = 0x0600_0000


class SystemClockSource(IntEnum):
    """Values of the SWS field in CFGR."""

    MSI = 0x00
    HSI = 0x04
    HSE = 0x08
    PLL = 0x0C


class PllSource(IntEnum):
    """Values of the PLLSRC field in PLLCFGR."""

    NONE = 0x00
    MSI = 0x01
    HSI = 0x02
    HSE = 0x03


@dataclass(frozen=True)
class ClockRegisters:
    """A snapshot of the clock control registers that set the core clock."""

    cr: int = 0
    csr: int = 0
    cfgr: int = 0
    pllcfgr: int = 0


def msi_range_frequency(registers: ClockRegisters) -> int:
    """Return the MSI frequency in Hz selected by CR or, after reset, by CSR."""
    if registers.cr & CR_MSIRGSEL:
        index = (registers.cr & CR_MSIRANGE) >> 4
    else:
        index = (registers.csr & CSR_MSISRANGE) >> 8
    if index >= len(MSI_RANGES):
        raise ValueError(f"MSI range {index} is not defined")
    return MSI_RANGES[index]


def _pll_frequency(registers: ClockRegisters, msi: int) -> int:
    pllcfgr = registers.pllcfgr
    source = pllcfgr & PLLCFGR_PLLSRC
    divider_m = ((pllcfgr & PLLCFGR_PLLM) >> 4) + 1

    if source == PllSource.HSI:
        vco = HSI_VALUE // divider_m
    elif source == PllSource.HSE:
        vco = HSE_VALUE // divider_m
    else:
        vco = msi // divider_m

    vco *= (pllcfgr & PLLCFGR_PLLN) >> 8
    divider_r = (((pllcfgr & PLLCFGR_PLLR) >> 25) + 1) * 2
    return vco // divider_r


def system_core_clock(registers: ClockRegisters) -> int:
    """Return the core (HCLK) frequency in Hz described by the registers."""
    msi = msi_range_frequency(registers)
    source = registers.cfgr & CFGR_SWS

    if source == SystemClockSource.HSI:
        sysclk = HSI_VALUE
    elif source == SystemClockSource.HSE:
        sysclk = HSE_VALUE
    elif source == SystemClockSource.PLL:
        sysclk = _pll_frequency(registers, msi)
    else:
        sysclk = msi

    shift = AHB_PRESCALER_SHIFTS[(registers.cfgr & CFGR_HPRE) >> 4]
    return (sysclk >> shift) & 0xFFFFFFFF