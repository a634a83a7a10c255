from .base import Base, CreatedAtMixin
from .knowledge import KnowledgeChunk

__all__ = [
    "Base",
    "CreatedAtMixin",
    "KnowledgeChunk",
]
