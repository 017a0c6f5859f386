"""
sep001 block stores.
"""

from sep001.storage.base import BlockStore
from sep001.storage.kubo import DEFAULT_API_URL, KuboBlockStore
from sep001.storage.memory import MemoryBlockStore

__all__ = [
    "BlockStore",
    "KuboBlockStore",
    "MemoryBlockStore",
    "DEFAULT_API_URL",
]
