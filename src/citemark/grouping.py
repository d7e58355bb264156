"""Sort citation spans and merge those sharing a start offset."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from citemark.types import AnnotationGroup, CitationSpan

type TargetOrder = Literal["lexicographic", "numeric"]


def group_spans(spans: Iterable[CitationSpan]) -> tuple[AnnotationGroup, ...]:
    """Merge spans into annotation groups ordered by (start, end).

    A group collects every span whose start equals the start of the group's
    first (representative) span; a new group begins as soon as the start
    changes. Repeated bibliography indices within one group collapse.
    """
    ordered = sorted(spans, key=lambda s: (s.start, s.end))
    groups: list[AnnotationGroup] = []
    i = 0
    while i < len(ordered):
        lead = ordered[i]
        indices: list[int] = []
        while i < len(ordered) and ordered[i].start == lead.start:
            if ordered[i].bib_index not in indices:
                indices.append(ordered[i].bib_index)
            i += 1
        groups.append(AnnotationGroup(
            start=lead.start,
            end=lead.end,
            bib_indices=tuple(indices),
        ))
    return tuple(groups)


def target_id(bib_index: int, prefix: str = "ref") -> str:
    """Render a zero-based bibliography index as a one-based target id."""
    return f"{prefix}{bib_index + 1}"


def target_ids(
    group: AnnotationGroup,
    *,
    prefix: str = "ref",
    order: TargetOrder = "lexicographic",
) -> tuple[str, ...]:
    """Target ids for a group.

    ``lexicographic`` sorts the rendered strings, so "ref10" precedes
    "ref2". ``numeric`` sorts by bibliography index instead.
    """
    if order == "lexicographic":
        return tuple(sorted(target_id(i, prefix) for i in group.bib_indices))
    if order == "numeric":
        return tuple(target_id(i, prefix) for i in sorted(group.bib_indices))
    raise ValueError(f"Unknown target order: {order!r}")
