import random

import pytest

from memhier.config import CacheConfig
from memhier.entity.model import Direction
from memhier.memory.memory_manager import CacheManager
from memhier.utils.config_utils import ConfigError

LINE = 64


def _cache(num_lines=2, line=LINE, size=None):
    return CacheManager(CacheConfig(CACHE_SIZE=size or num_lines*line, CACHE_LINE_SIZE=line), "test")


@pytest.mark.ci
def test_cache_same_line_hits():
    cache = _cache(num_lines=4)

    assert cache.access(100) is False
    # 100, 127 and 64 all live in block 64
    assert cache.access(127) is True
    assert cache.access(64) is True
    assert cache.access(128) is False

    assert cache.resident_blocks() == [64, 128]
    assert cache.hits == 2
    assert cache.misses == 2


@pytest.mark.ci
def test_cache_lru_evicts_least_recent():
    cache = _cache(num_lines=2)
    A, B, C = 0, LINE, 2*LINE

    for addr in (A, B, A, C):
        cache.access(addr)

    assert A in cache
    assert C in cache
    assert B not in cache
    assert cache.stat()["evictions"] == 1
    assert cache.access(B) is False


@pytest.mark.ci
def test_cache_clock_counts_every_access():
    cache = _cache(num_lines=4)
    rng = random.Random(7)
    for n in range(1, 201):
        cache.access(rng.randrange(0, 64*LINE))
        assert cache.clock == n


@pytest.mark.ci
def test_cache_timestamps_never_from_future():
    cache = _cache(num_lines=8)
    rng = random.Random(11)
    for _ in range(500):
        addr = rng.randrange(0, 32*LINE)
        cache.access(addr)
        lines = cache.lines()
        assert all(line.last_used <= cache.clock for line in lines)
        # the line just touched carries the current clock
        assert lines[-1].block_address == addr // LINE * LINE
        assert lines[-1].last_used == cache.clock
        # recency order matches timestamps
        stamps = [line.last_used for line in lines]
        assert stamps == sorted(stamps)


@pytest.mark.ci
@pytest.mark.parametrize("size,line", [(128, 64), (200, 64), (64, 64), (32768, 64), (1000, 32)])
def test_cache_capacity_invariant(size, line):
    cache = _cache(size=size, line=line)
    rng = random.Random(size)
    for _ in range(2000):
        cache.access(rng.randrange(0, 4*size))
        assert len(cache)*line <= size
        assert cache.occupancy_bytes <= size


def test_cache_steady_state_occupancy():
    cache = _cache(num_lines=4)
    for i in range(10):
        cache.access(i*LINE)
    assert len(cache) == 4
    assert cache.resident_blocks() == [6*LINE, 7*LINE, 8*LINE, 9*LINE]


@pytest.mark.ci
def test_cache_hit_rate_bounds():
    cache = _cache(num_lines=4)
    assert cache.hit_rate() == 0

    rng = random.Random(3)
    for _ in range(300):
        cache.access(rng.randrange(0, 8*LINE))
        assert 0 <= cache.hit_rate() <= 100

    cache = _cache(num_lines=1)
    cache.access(0)
    cache.access(1)
    cache.access(2)
    assert cache.hit_rate() == pytest.approx(200/3)


def test_cache_direction_stat():
    cache = _cache(num_lines=2)
    cache.access(0, Direction.WRITE)
    cache.access(0, Direction.READ)
    cache.access(LINE, "read")

    stat = cache.stat()
    assert stat["write_misses"] == 1
    assert stat["read_hits"] == 1
    assert stat["read_misses"] == 1

    cache_stat = cache.cache_stat()
    assert cache_stat.write_count == 1
    assert cache_stat.write_hit_count == 0
    assert cache_stat.read_count == 2
    assert cache_stat.read_hit_count == 1
    assert cache_stat.hit_rate == pytest.approx(100/3)


def test_cache_reuse_distance_histogram():
    cache = _cache(num_lines=4)
    for addr in (0, LINE, 0, 0):
        cache.access(addr)
    assert cache.histogram() == {2: 1, 1: 1}


def test_cache_evict_empty_is_noop():
    cache = _cache(num_lines=2)
    assert cache._evict() is None
    assert len(cache) == 0


@pytest.mark.ci
@pytest.mark.parametrize("size,line", [(0, 64), (-64, 64), (128, 0), (128, -1), (32, 64)])
def test_cache_rejects_bad_geometry(size, line):
    with pytest.raises(ConfigError):
        CacheManager(CacheConfig(CACHE_SIZE=size, CACHE_LINE_SIZE=line))
