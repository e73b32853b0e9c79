def addr_to_block_addr(addr: int, cache_line_size: int) -> int:
    """Truncate ``addr`` to the start of its cache line."""
    return addr // cache_line_size * cache_line_size


__all__ = ["addr_to_block_addr"]
