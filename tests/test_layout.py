import pytest

from xvtools.layout import (
    CLINT,
    PLIC,
    FileType,
    Stat,
    clint_mtimecmp,
    plic_mclaim,
    plic_menable,
    plic_mpriority,
    plic_sclaim,
    plic_senable,
    plic_spriority,
)


def test_clint_timer_compare_per_hart():
    assert clint_mtimecmp(0) == CLINT + 0x4000
    assert clint_mtimecmp(3) - clint_mtimecmp(2) == 8


def test_plic_enable_registers():
    assert plic_menable(0) == PLIC + 0x2000
    assert plic_senable(0) == PLIC + 0x2080
    assert plic_senable(2) - plic_senable(1) == 0x100


def test_plic_priority_and_claim():
    assert plic_mpriority(0) == PLIC + 0x200000
    assert plic_spriority(0) == PLIC + 0x201000
    assert plic_mclaim(1) == plic_mpriority(1) + 4
    assert plic_sclaim(1) == plic_spriority(1) + 4
    assert plic_sclaim(1) - plic_sclaim(0) == 0x2000


def test_stat_coerces_type():
    st = Stat(dev=1, ino=2, type=2, nlink=1, size=0)
    assert st.type is FileType.FILE


def test_stat_rejects_unknown_type():
    with pytest.raises(ValueError):
        Stat(dev=1, ino=2, type=9, nlink=1, size=0)


def test_file_type_lookup():
    assert FileType(1) is FileType.DIR
    assert FileType(3) is FileType.DEVICE