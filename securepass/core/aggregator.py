from typing import Sequence
from pydantic import BaseModel, Field

from .index import platform_frequency, tag_frequency, top_entries
from .models import ApiKeyRecord, NoteRecord, PasswordRecord

TOP_LIMIT = 5


class FrequencyEntry(BaseModel):
    name: str
    count: int


class VaultSummary(BaseModel):
    api_keys: int = 0
    passwords: int = 0
    notes: int = 0
    top_tags: list[FrequencyEntry] = Field(default_factory=list)
    top_platforms: list[FrequencyEntry] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.api_keys + self.passwords + self.notes


def summarize(api_keys: Sequence[ApiKeyRecord],
              passwords: Sequence[PasswordRecord],
              notes: Sequence[NoteRecord],
              limit: int = TOP_LIMIT) -> VaultSummary:
    """Cross-kind summary over the full lists, ignoring any filter or page state."""
    tags = tag_frequency(api_keys, passwords, notes)
    return VaultSummary(
        api_keys=len(api_keys),
        passwords=len(passwords),
        notes=len(notes),
        top_tags=[FrequencyEntry(name=n, count=c) for n, c in top_entries(tags, limit)],
        top_platforms=[FrequencyEntry(name=n, count=c) for n, c in top_entries(platform_frequency(passwords), limit)],
    )
