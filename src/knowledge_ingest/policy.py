"""Owner scopes and per-deployment ingestion policies."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .config import Settings, settings as default_settings
from .media_types import POWERPOINT_TYPES, RTF_TYPES

CHARS_PER_TOKEN = 4

# Hard ceiling for a single chunk, independent of any policy
MAX_CHARS_PER_CHUNK = 30000


class OwnerKind(str, enum.Enum):
    AGENT = "agent"
    COMPANY = "company"


@dataclass(frozen=True)
class OwnerScope:
    """Who a knowledge record belongs to: an agent or a company."""

    kind: OwnerKind
    id: str

    @classmethod
    def agent(cls, agent_id: str) -> "OwnerScope":
        return cls(OwnerKind.AGENT, agent_id)

    @classmethod
    def company(cls, company_id: str) -> "OwnerScope":
        return cls(OwnerKind.COMPANY, company_id)


@dataclass(frozen=True)
class ChunkingPolicy:
    min_tokens: int = 50
    max_tokens: int = 500
    overlap_tokens: int = 50

    def __post_init__(self):
        if self.min_tokens < 0:
            raise ValueError("min_tokens must be zero or greater")
        if self.max_tokens <= 0:
            raise ValueError("max_tokens must be greater than zero")
        if self.overlap_tokens < 0:
            raise ValueError("overlap_tokens must be zero or greater")

    @property
    def min_chars(self) -> int:
        return self.min_tokens * CHARS_PER_TOKEN

    @property
    def max_chars(self) -> int:
        return min(self.max_tokens * CHARS_PER_TOKEN, MAX_CHARS_PER_CHUNK)

    @property
    def overlap_chars(self) -> int:
        return self.overlap_tokens * CHARS_PER_TOKEN

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ChunkingPolicy":
        settings = settings or default_settings
        return cls(
            min_tokens=settings.CHUNK_MIN_TOKENS,
            max_tokens=settings.CHUNK_MAX_TOKENS,
            overlap_tokens=settings.CHUNK_OVERLAP_TOKENS,
        )


@dataclass(frozen=True)
class ValidationPolicy:
    """Upload limits and format switches for one deployment variant.

    ``disabled_types`` pass validation but are refused at extraction time.
    """

    max_file_size: int
    reject_images: bool = True
    disabled_types: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def for_owner(cls, kind: OwnerKind, settings: Optional[Settings] = None) -> "ValidationPolicy":
        settings = settings or default_settings
        if kind == OwnerKind.COMPANY:
            return cls(
                max_file_size=settings.COMPANY_MAX_FILE_SIZE,
                reject_images=False,
            )
        return cls(
            max_file_size=settings.AGENT_MAX_FILE_SIZE,
            reject_images=True,
            disabled_types=POWERPOINT_TYPES | RTF_TYPES,
        )


__all__ = [
    "CHARS_PER_TOKEN",
    "MAX_CHARS_PER_CHUNK",
    "OwnerKind",
    "OwnerScope",
    "ChunkingPolicy",
    "ValidationPolicy",
]
