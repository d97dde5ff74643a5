"""
Storage for the shared face count record.
"""

from .count_store import CountStore, FileCountStore, MemoryCountStore, create_count_store
from .writer import CountWriter, PerFrameCountWriter, SequencedCountWriter, create_count_writer

__all__ = [
    "CountStore",
    "FileCountStore",
    "MemoryCountStore",
    "create_count_store",
    "CountWriter",
    "PerFrameCountWriter",
    "SequencedCountWriter",
    "create_count_writer",
]
