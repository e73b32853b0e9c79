from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from memhier.utils.base_utils import BaseDataclass


@dataclass
class DistanceCount:
    distance: int
    count: int


@dataclass
class Diagnostic(BaseDataclass):
    level: str
    source: str
    message: str
    index: Optional[int] = None


@dataclass
class CacheStat(BaseDataclass):
    write_count: int = 0
    write_hit_count: int = 0
    read_count: int = 0
    read_hit_count: int = 0

    @property
    def hits(self):
        return self.read_hit_count + self.write_hit_count

    @property
    def accesses(self):
        return self.read_count + self.write_count

    @property
    def misses(self):
        return self.accesses - self.hits

    @property
    def hit_rate(self):
        # percentage
        return self.hits/self.accesses*100 if self.accesses > 0 else 0.0

    @property
    def write_hit_rate(self):
        return self.write_hit_count/self.write_count*100 if self.write_count > 0 else 0.0

    @property
    def read_hit_rate(self):
        return self.read_hit_count/self.read_count*100 if self.read_count > 0 else 0.0

    @classmethod
    def from_counter(cls, counter: Counter) -> 'CacheStat':
        return cls(
            write_count=counter["write_hits"] + counter["write_misses"],
            write_hit_count=counter["write_hits"],
            read_count=counter["read_hits"] + counter["read_misses"],
            read_hit_count=counter["read_hits"],
        )

    def to_dict(self) -> Dict[str, Any]:
        report = asdict(self)
        report.update({
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
            "read_hit_rate": self.read_hit_rate,
            "write_hit_rate": self.write_hit_rate,
        })
        return report


@dataclass
class ScratchpadStat(BaseDataclass):
    capacity_bytes: int
    used_bytes: int = 0
    allocations: int = 0
    overflows: int = 0
    rejected_bytes: int = 0

    @property
    def utilization(self):
        return self.used_bytes/self.capacity_bytes*100

    def to_dict(self) -> Dict[str, Any]:
        report = asdict(self)
        report["utilization"] = self.utilization
        return report


@dataclass
class HierarchyReport(BaseDataclass):
    l1: CacheStat
    l2: CacheStat
    lds: ScratchpadStat
    instruction_count: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instruction_count": self.instruction_count,
            "L1": self.l1.to_dict(),
            "L2": self.l2.to_dict(),
            "LDS": self.lds.to_dict(),
            "diagnostics": [asdict(d) for d in self.diagnostics],
        }

    def summary_lines(self) -> List[str]:
        lines = [
            f"L1 hit rate: {self.l1.hit_rate:.2f}%",
            f"L2 hit rate: {self.l2.hit_rate:.2f}%",
            f"LDS utilization: {self.lds.utilization:.2f}%",
        ]
        if self.diagnostics:
            lines.append(f"{len(self.diagnostics)} warning(s)")
        return lines


__all__ = ["CacheStat", "Diagnostic", "DistanceCount", "HierarchyReport", "ScratchpadStat"]
