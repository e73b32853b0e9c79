from dataclasses import dataclass, field

from memhier.utils.config_utils import ConfigError

KB = 1024
MB = 1024 * KB
GB = 1024 * MB


def _require_positive(owner: str, name: str, value):
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"{owner}.{name} must be a positive integer, got {value!r}")


@dataclass
class CacheConfig:
    CACHE_SIZE: int = field(default=32 * KB)
    CACHE_LINE_SIZE: int = field(default=64)

    def validate(self, owner: str = "cache"):
        _require_positive(owner, "CACHE_SIZE", self.CACHE_SIZE)
        _require_positive(owner, "CACHE_LINE_SIZE", self.CACHE_LINE_SIZE)
        if self.CACHE_SIZE < self.CACHE_LINE_SIZE:
            raise ConfigError(
                f"{owner}.CACHE_SIZE ({self.CACHE_SIZE}) cannot hold a single "
                f"{self.CACHE_LINE_SIZE}-byte line")


@dataclass
class ScratchpadConfig:
    SIZE: int = field(default=128 * KB)

    def validate(self, owner: str = "lds"):
        _require_positive(owner, "SIZE", self.SIZE)


@dataclass
class GlobalMemoryConfig:
    # size only, accesses are not tracked
    SIZE: int = field(default=8 * GB)

    def validate(self, owner: str = "global_memory"):
        _require_positive(owner, "SIZE", self.SIZE)


@dataclass
class MemoryConfig:
    l1: CacheConfig = field(default_factory=CacheConfig)
    l2: CacheConfig = field(default_factory=lambda: CacheConfig(CACHE_SIZE=2 * MB))
    lds: ScratchpadConfig = field(default_factory=ScratchpadConfig)
    global_memory: GlobalMemoryConfig = field(default_factory=GlobalMemoryConfig)


@dataclass
class HierarchyConfig:
    name: str = "default"
    memory: MemoryConfig = field(default_factory=MemoryConfig)

    def validate(self) -> 'HierarchyConfig':
        self.memory.l1.validate("memory.l1")
        self.memory.l2.validate("memory.l2")
        self.memory.lds.validate("memory.lds")
        self.memory.global_memory.validate("memory.global_memory")
        return self
