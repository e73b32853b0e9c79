from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from memhier.utils.config_utils import BaseEnum, ConfigError

DEFAULT_LDS_ACCESS_SIZE = 4


class Direction(str, BaseEnum):
    READ = "read"
    WRITE = "write"


class InstructionKind(str, BaseEnum):
    LOAD = "LOAD"
    STORE = "STORE"
    LDS_LOAD = "LDS_LOAD"
    LDS_STORE = "LDS_STORE"

    @property
    def is_lds(self) -> bool:
        return self in (InstructionKind.LDS_LOAD, InstructionKind.LDS_STORE)


@dataclass(frozen=True)
class Instruction:
    kind: InstructionKind
    address: int
    size: Optional[int] = None

    def __post_init__(self):
        # frozen, so bypass __setattr__; accepts "lds_load" as well as the member
        object.__setattr__(self, "kind", InstructionKind(self.kind))
        if self.address < 0:
            raise ValueError(f"instruction address must be non-negative, got {self.address}")
        if self.size is not None and self.size <= 0:
            raise ValueError(f"instruction size must be positive, got {self.size}")

    @property
    def lds_size(self) -> int:
        return self.size if self.size is not None else DEFAULT_LDS_ACCESS_SIZE


@dataclass
class CacheLine:
    block_address: int
    last_used: int


__all__ = [
    "CacheLine",
    "ConfigError",
    "DEFAULT_LDS_ACCESS_SIZE",
    "Direction",
    "Instruction",
    "InstructionKind",
]
