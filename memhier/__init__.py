"""
Memory-access model of a small GPU-like hierarchy.

Instructions are replayed through two LRU cache levels (L1, L2) and a
scratchpad (LDS); hit rates and scratchpad utilization are read back from
the hierarchy or from the report it produces.
"""

from memhier.arch import MemoryHierarchy
from memhier.config import CacheConfig, HierarchyConfig, ScratchpadConfig
from memhier.entity.model import Direction, Instruction, InstructionKind
from memhier.memory.memory_manager import CacheManager, ScratchpadManager
from memhier.parser import parse_kernel
from memhier.utils.config_utils import ConfigError

__all__ = [
    "CacheConfig",
    "CacheManager",
    "ConfigError",
    "Direction",
    "HierarchyConfig",
    "Instruction",
    "InstructionKind",
    "MemoryHierarchy",
    "ScratchpadConfig",
    "ScratchpadManager",
    "parse_kernel",
]
