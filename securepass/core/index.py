"""
Search, category filtering and tag/platform frequency over loaded records.

Everything here is a pure function of the records and the filter state, so the
result does not depend on whether a filter was set before or after a re-list.
Text comparison folds case on both sides.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .models import PasswordRecord, RecordKind, VaultRecord

ALL_CATEGORIES = "all"


def matches_query(record: VaultRecord, query: str) -> bool:
    if not query:
        return True
    needle = query.casefold()
    return any(needle in value.casefold() for value in record.search_values())


def matches_category(record: VaultRecord, category: str) -> bool:
    if not category or category == ALL_CATEGORIES:
        return True
    if record.kind is not RecordKind.PASSWORD:
        return True
    return record.app_name == category  # type: ignore[attr-defined]


def filter_records(records: Iterable[VaultRecord], query: str = "", category: str = ALL_CATEGORIES) -> list[VaultRecord]:
    return [r for r in records if matches_query(r, query) and matches_category(r, category)]


def tag_frequency(*collections: Iterable[VaultRecord]) -> Counter:
    """Number of records carrying each tag, across every collection given.

    Keys keep the order in which tags were first seen.
    """
    counts: Counter = Counter()
    for records in collections:
        for record in records:
            for tag in dict.fromkeys(t.casefold() for t in record.tags):
                counts[tag] += 1
    return counts


def platform_frequency(passwords: Iterable[PasswordRecord]) -> Counter:
    return Counter(p.app_name for p in passwords)


def platforms(passwords: Iterable[PasswordRecord]) -> list[str]:
    return sorted({p.app_name for p in passwords})


def top_entries(frequency: Counter, limit: int = 5) -> list[tuple[str, int]]:
    # most_common keeps first-seen order among equal counts
    return frequency.most_common(limit)


@dataclass
class RecordIndex:
    records: Sequence[VaultRecord]
    query: str = ""
    category: str = ALL_CATEGORIES
    _visible: list[VaultRecord] | None = field(default=None, init=False, repr=False)

    @property
    def visible(self) -> list[VaultRecord]:
        if self._visible is None:
            self._visible = filter_records(self.records, self.query, self.category)
        return self._visible

    @property
    def platforms(self) -> list[str]:
        return platforms(r for r in self.records if isinstance(r, PasswordRecord))

    def tag_counts(self) -> Counter:
        return tag_frequency(self.records)

    def __len__(self) -> int:
        return len(self.visible)
