import logging

import pytest

from memhier.config import ScratchpadConfig
from memhier.memory.memory_manager import ScratchpadManager
from memhier.utils.config_utils import ConfigError


@pytest.mark.ci
def test_scratchpad_saturation():
    lds = ScratchpadManager(ScratchpadConfig(SIZE=100))

    assert lds.allocate(60) is True
    assert lds.allocate(50) is False
    assert lds.used_bytes == 60
    assert lds.utilization() == pytest.approx(60.0)

    # exact fit is still accepted
    assert lds.allocate(40) is True
    assert lds.used_bytes == 100
    assert lds.utilization() == pytest.approx(100.0)
    assert lds.allocate(1) is False


def test_scratchpad_stat():
    lds = ScratchpadManager(ScratchpadConfig(SIZE=100))
    lds.allocate(60)
    lds.allocate(50)

    stat = lds.scratchpad_stat()
    assert stat.capacity_bytes == 100
    assert stat.used_bytes == 60
    assert stat.allocations == 1
    assert stat.overflows == 1
    assert stat.rejected_bytes == 50
    assert stat.utilization == pytest.approx(60.0)
    assert lds.stat()["allocated_bytes"] == 60


def test_scratchpad_overflow_is_logged(caplog):
    lds = ScratchpadManager(ScratchpadConfig(SIZE=8), "LDS")
    with caplog.at_level(logging.WARNING, logger="memhier.memory.memory_manager"):
        lds.allocate(16)
    assert "LDS overflow" in caplog.text


def test_scratchpad_used_bytes_never_decreases():
    lds = ScratchpadManager(ScratchpadConfig(SIZE=1024))
    last = 0
    for size in (100, 900, 30, 24, 1, 500, 0x10):
        lds.allocate(size)
        assert lds.used_bytes >= last
        assert lds.used_bytes <= 1024
        last = lds.used_bytes
    assert lds.used_bytes == 1024


def test_scratchpad_rejects_non_positive_size():
    lds = ScratchpadManager(ScratchpadConfig(SIZE=100))
    with pytest.raises(ValueError):
        lds.allocate(0)
    with pytest.raises(ValueError):
        lds.allocate(-8)
    assert lds.used_bytes == 0


@pytest.mark.ci
@pytest.mark.parametrize("size", [0, -1])
def test_scratchpad_rejects_bad_capacity(size):
    with pytest.raises(ConfigError):
        ScratchpadManager(ScratchpadConfig(SIZE=size))
