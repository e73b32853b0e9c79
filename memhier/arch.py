import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional

from memhier.config import HierarchyConfig
from memhier.entity.model import Direction, Instruction, InstructionKind
from memhier.entity.report import Diagnostic, DistanceCount, HierarchyReport
from memhier.memory.memory_manager import CacheManager, ScratchpadManager

logger = logging.getLogger(__name__)


class MemoryHierarchy:
    """L1 and L2 caches plus an LDS scratchpad, fed one instruction at a time.

    Routing:

    * ``LOAD`` probes L1, then L2 on an L1 miss. An L2 miss falls through to
      global memory, which is size-only and not tracked.
    * ``STORE`` touches L1 only.
    * ``LDS_LOAD`` / ``LDS_STORE`` reserve scratchpad space (4 bytes when the
      instruction carries no size).

    Each instance owns its managers; build a new hierarchy per run.
    """

    def __init__(self, config: Optional[HierarchyConfig] = None):
        self.config = (config or HierarchyConfig()).validate()
        memory = self.config.memory
        self.L1 = CacheManager(memory.l1, "L1")
        self.L2 = CacheManager(memory.l2, "L2")
        self.LDS = ScratchpadManager(memory.lds, "LDS")
        self.global_memory_size = memory.global_memory.SIZE
        self.instruction_count = 0
        self.diagnostics: List[Diagnostic] = []

    def process(self, instruction: Instruction) -> bool:
        """Apply one instruction.

        Returns whether it was served without falling further than intended:
        an L1 or L2 hit for loads, an L1 hit for stores, a committed
        allocation for scratchpad accesses.
        """
        index = self.instruction_count
        self.instruction_count += 1
        kind = instruction.kind
        if kind == InstructionKind.LOAD:
            if self.L1.access(instruction.address, Direction.READ):
                return True
            if self.L2.access(instruction.address, Direction.READ):
                return True
            logger.debug("instr %d: load 0x%x served by global memory", index, instruction.address)
            return False
        elif kind == InstructionKind.STORE:
            return self.L1.access(instruction.address, Direction.WRITE)
        elif kind.is_lds:
            size = instruction.lds_size
            if self.LDS.allocate(size):
                return True
            self.diagnostics.append(Diagnostic(
                level="warning",
                source="LDS",
                message=f"LDS overflow: {size} bytes requested, "
                        f"{self.LDS.used_bytes}/{self.LDS.capacity_bytes} bytes in use",
                index=index,
            ))
            return False
        raise TypeError(f"instruction kind {kind!r} is not supported")

    def run(self, instructions: Iterable[Instruction]) -> HierarchyReport:
        for instruction in instructions:
            self.process(instruction)
        logger.info("replayed %d instructions: L1 %.2f%%, L2 %.2f%%, LDS %.2f%%",
                    self.instruction_count, self.L1.hit_rate(), self.L2.hit_rate(),
                    self.LDS.utilization())
        return self.report()

    def report(self, extra_diagnostics: Iterable[Diagnostic] = ()) -> HierarchyReport:
        return HierarchyReport(
            l1=self.L1.cache_stat(),
            l2=self.L2.cache_stat(),
            lds=self.LDS.scratchpad_stat(),
            instruction_count=self.instruction_count,
            diagnostics=list(extra_diagnostics) + list(self.diagnostics),
        )

    def stat_dict(self) -> Dict[str, Counter]:
        return {
            "L1": self.L1.stat(),
            "L2": self.L2.stat(),
            "LDS": self.LDS.stat(),
        }

    def histogram_dict(self) -> Dict[str, Counter]:
        return {
            "L1": self.L1.histogram(),
            "L2": self.L2.histogram(),
        }

    def histogram(self) -> Mapping[str, List[DistanceCount]]:
        his = {}
        for lvl, distance in self.histogram_dict().items():
            his[lvl] = [DistanceCount(k, v) for k, v in sorted(distance.items(), reverse=True)]
        return his


__all__ = ["MemoryHierarchy"]
