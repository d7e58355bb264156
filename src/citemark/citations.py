"""Citation position sources.

A position source answers "which raw citation spans belong to paragraph
``i`` of the section at ``path``?". Spans come back unsorted; grouping and
ordering happen in ``citemark.grouping``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

from citemark.types import CitationSpan, SectionPath


class CitationPositionSource(Protocol):
    def get_positions(
        self, section_path: SectionPath, paragraph_index: int,
    ) -> list[CitationSpan]: ...


@dataclass(frozen=True, slots=True)
class CitationPositionIndex:
    """In-memory position source keyed by (section path, paragraph index)."""

    positions: Mapping[tuple[SectionPath, int], tuple[CitationSpan, ...]]

    @classmethod
    def from_records(
        cls, records: Iterable[tuple[SectionPath, int, CitationSpan]],
    ) -> CitationPositionIndex:
        buckets: dict[tuple[SectionPath, int], list[CitationSpan]] = defaultdict(list)
        for section_path, paragraph_index, span in records:
            buckets[(tuple(section_path), paragraph_index)].append(span)
        return cls({key: tuple(spans) for key, spans in buckets.items()})

    def get_positions(
        self, section_path: SectionPath, paragraph_index: int,
    ) -> list[CitationSpan]:
        return list(self.positions.get((tuple(section_path), paragraph_index), ()))

    def __len__(self) -> int:
        return sum(len(spans) for spans in self.positions.values())
