from collections import Counter


class AbstractMemoryManager:
    def __init__(self, config, name: str):
        self.config = config
        self.name = name

    def stat(self) -> Counter:
        return Counter()

    def histogram(self) -> Counter:
        return Counter()


__all__ = ["AbstractMemoryManager"]
