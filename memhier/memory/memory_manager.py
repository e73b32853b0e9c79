from __future__ import annotations

import logging
from collections import Counter, OrderedDict
from typing import List, Optional

from memhier.config import CacheConfig, ScratchpadConfig
from memhier.entity.model import CacheLine, Direction
from memhier.entity.report import CacheStat, ScratchpadStat
from memhier.memory import AbstractMemoryManager
from memhier.memory.addr_converter import addr_to_block_addr

logger = logging.getLogger(__name__)


class CacheManager(AbstractMemoryManager):
    """Fully associative cache level with LRU replacement.

    Lines are keyed by block address and kept in recency order, so the
    least recently used line is always the first entry of ``_lines``.
    Every call to :meth:`access` advances a private logical clock by one;
    the clock value is stamped on the line that was touched.
    """

    def __init__(self, config: CacheConfig, name: str = "cache"):
        config.validate(name)
        super().__init__(config, name)
        self.capacity_bytes = config.CACHE_SIZE
        self.line_size_bytes = config.CACHE_LINE_SIZE
        self._lines: OrderedDict[int, CacheLine] = OrderedDict()
        self._clock = 0
        self._stat = Counter()
        self._hist = Counter()

    @property
    def clock(self) -> int:
        return self._clock

    @property
    def hits(self) -> int:
        return self._stat["read_hits"] + self._stat["write_hits"]

    @property
    def misses(self) -> int:
        return self._stat["read_misses"] + self._stat["write_misses"]

    @property
    def occupancy_bytes(self) -> int:
        return len(self._lines) * self.line_size_bytes

    def __len__(self):
        return len(self._lines)

    def __contains__(self, address: int) -> bool:
        return addr_to_block_addr(address, self.line_size_bytes) in self._lines

    def access(self, address: int, direction: Direction = Direction.READ) -> bool:
        """Touch ``address``; returns True on a hit, False on a miss."""
        self._clock += 1
        block_addr = addr_to_block_addr(address, self.line_size_bytes)
        line = self._lines.get(block_addr)
        hit = line is not None
        if hit:
            self._hist[self._clock - line.last_used] += 1
            line.last_used = self._clock
            self._lines.move_to_end(block_addr)
        else:
            self._allocate(block_addr)
        self._record(direction, hit)
        return hit

    def _record(self, direction: Direction, hit: bool):
        key = f"{Direction(direction).value}_{'hits' if hit else 'misses'}"
        self._stat[key] += 1

    def _allocate(self, block_addr: int):
        while self._lines and self.occupancy_bytes + self.line_size_bytes > self.capacity_bytes:
            self._evict()
        self._lines[block_addr] = CacheLine(block_addr, self._clock)

    def _evict(self) -> Optional[CacheLine]:
        if not self._lines:
            return None
        _, victim = self._lines.popitem(last=False)
        self._stat["evictions"] += 1
        logger.debug("%s evict block 0x%x (last used %d, clock %d)",
                     self.name, victim.block_address, victim.last_used, self._clock)
        return victim

    def lines(self) -> List[CacheLine]:
        # least recently used first
        return [CacheLine(line.block_address, line.last_used) for line in self._lines.values()]

    def resident_blocks(self) -> List[int]:
        return list(self._lines.keys())

    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits/total*100 if total > 0 else 0.0

    def stat(self) -> Counter:
        return Counter(self._stat)

    def histogram(self) -> Counter:
        return Counter(self._hist)

    def cache_stat(self) -> CacheStat:
        return CacheStat.from_counter(self._stat)


class ScratchpadManager(AbstractMemoryManager):
    """Allocation-only occupancy tracker for the local data store."""

    def __init__(self, config: ScratchpadConfig, name: str = "lds"):
        config.validate(name)
        super().__init__(config, name)
        self.capacity_bytes = config.SIZE
        self._used = 0
        self._stat = Counter()

    @property
    def used_bytes(self) -> int:
        return self._used

    def allocate(self, size: int) -> bool:
        """Reserve ``size`` bytes; returns False and changes nothing on overflow."""
        if size <= 0:
            raise ValueError(f"{self.name} allocation size must be positive, got {size}")
        if self._used + size <= self.capacity_bytes:
            self._used += size
            self._stat["allocations"] += 1
            self._stat["allocated_bytes"] += size
            return True
        self._stat["overflows"] += 1
        self._stat["rejected_bytes"] += size
        logger.warning("%s overflow: %d bytes requested, %d of %d bytes in use",
                       self.name, size, self._used, self.capacity_bytes)
        return False

    def utilization(self) -> float:
        return self._used/self.capacity_bytes*100

    def stat(self) -> Counter:
        return Counter(self._stat)

    def scratchpad_stat(self) -> ScratchpadStat:
        return ScratchpadStat(
            capacity_bytes=self.capacity_bytes,
            used_bytes=self._used,
            allocations=self._stat["allocations"],
            overflows=self._stat["overflows"],
            rejected_bytes=self._stat["rejected_bytes"],
        )


__all__ = ["CacheManager", "ScratchpadManager"]
