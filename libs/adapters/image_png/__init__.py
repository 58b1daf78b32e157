from .fakes import MemoryImageWriter

__all__ = ["MemoryImageWriter"]
