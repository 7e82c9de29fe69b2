import pytest

from vitalsense.clock import (
    HSE_VALUE,
    HSI_VALUE,
    MSI_RANGES,
    ClockRegisters,
    msi_range_frequency,
    system_core_clock,
)

MSI_RANGE_6_CSR = 6 << 8
SWS_MSI = 0x00
SWS_HSI = 0x04
SWS_HSE = 0x08
SWS_PLL = 0x0C


def _pll(source, m_bits=0, n=40, r_bits=0):
    return source | (m_bits << 4) | (n << 8) | (r_bits << 25)


def test_msi_from_csr_after_reset():
    regs = ClockRegisters(cr=0xB << 4, csr=MSI_RANGE_6_CSR)
    assert msi_range_frequency(regs) == 4000000


def test_msi_from_cr_when_selected():
    regs = ClockRegisters(cr=0x8 | (11 << 4), csr=MSI_RANGE_6_CSR)
    assert msi_range_frequency(regs) == 48000000


@pytest.mark.parametrize("index", range(len(MSI_RANGES)))
def test_msi_table_lookup(index):
    regs = ClockRegisters(cr=0x8 | (index << 4))
    assert msi_range_frequency(regs) == MSI_RANGES[index]


def test_msi_lowest_range():
    assert msi_range_frequency(ClockRegisters()) == 100000


@pytest.mark.parametrize("index", [12, 13, 15])
def test_undefined_msi_range_raises(index):
    with pytest.raises(ValueError):
        msi_range_frequency(ClockRegisters(cr=0x8 | (index << 4)))


def test_msi_as_system_clock():
    regs = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_MSI)
    assert system_core_clock(regs) == msi_range_frequency(regs)


def test_hsi_as_system_clock():
    regs = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_HSI)
    assert system_core_clock(regs) == HSI_VALUE


def test_hse_as_system_clock():
    regs = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_HSE)
    assert system_core_clock(regs) == HSE_VALUE


def test_pll_from_msi_as_configured_by_application():
    regs = ClockRegisters(
        cr=0x8 | (6 << 4),
        cfgr=SWS_PLL,
        pllcfgr=_pll(0x01, m_bits=0, n=40, r_bits=0),
    )
    assert system_core_clock(regs) == 80000000


def test_pll_hsi_source_is_twice_hse_source():
    hsi = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x02))
    hse = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x03))
    assert system_core_clock(hsi) == 2 * system_core_clock(hse)


def test_pll_unset_source_falls_back_to_msi():
    none = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x00))
    msi = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x01))
    assert system_core_clock(none) == system_core_clock(msi)


def test_pll_multiplier_scales_linearly():
    low = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x01, n=20))
    high = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x01, n=40))
    assert system_core_clock(high) == 2 * system_core_clock(low)


def test_pll_r_divider_divides():
    div2 = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x02, r_bits=0))
    div4 = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x02, r_bits=1))
    assert system_core_clock(div2) == 2 * system_core_clock(div4)


def test_pll_m_divider_divides():
    m1 = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x02, m_bits=0))
    m2 = ClockRegisters(csr=MSI_RANGE_6_CSR, cfgr=SWS_PLL, pllcfgr=_pll(0x02, m_bits=1))
    assert system_core_clock(m1) == 2 * system_core_clock(m2)


@pytest.mark.parametrize("hpre", range(8))
def test_ahb_prescaler_below_eight_does_not_divide(hpre):
    regs = ClockRegisters(cfgr=SWS_HSI | (hpre << 4))
    assert system_core_clock(regs) == HSI_VALUE


def test_ahb_prescaler_divides_by_two():
    regs = ClockRegisters(cfgr=SWS_HSI | (8 << 4))
    assert system_core_clock(regs) * 2 == HSI_VALUE


def test_ahb_prescaler_skips_divide_by_32():
    div16 = ClockRegisters(cfgr=SWS_HSI | (11 << 4))
    div64 = ClockRegisters(cfgr=SWS_HSI | (12 << 4))
    assert system_core_clock(div16) == 4 * system_core_clock(div64)


def test_undefined_msi_range_raises_for_core_clock():
    with pytest.raises(ValueError):
        system_core_clock(ClockRegisters(cr=0x8 | (14 << 4), cfgr=SWS_HSI))