"""Hierarchical section identifiers.

Top-level sections are numbered "1", "2", ... in document order; children of
a section get "<parent>-1", "<parent>-2", ... The numbering depends only on
tree shape and sibling order, never on titles or paragraph content.
"""

from __future__ import annotations

from collections.abc import Sequence

from citemark.types import SectionNode, SectionPath

ID_SEPARATOR = "-"


def child_section_id(sibling_index: int, parent_id: str = "") -> str:
    """Identifier of the child at 0-based ``sibling_index`` under ``parent_id``.

    An empty ``parent_id`` means a top-level section.
    """
    if sibling_index < 0:
        raise ValueError(f"sibling_index must be >= 0, got {sibling_index}")
    ordinal = str(sibling_index + 1)
    if not parent_id:
        return ordinal
    return f"{parent_id}{ID_SEPARATOR}{ordinal}"


def assign_section_ids(
    sections: Sequence[SectionNode],
) -> tuple[tuple[SectionPath, str], ...]:
    """Number a section forest in one preorder pass.

    Returns ``(path, section_id)`` pairs in document order, where ``path`` is
    the tuple of 0-based sibling indices from the root.
    """
    assigned: list[tuple[SectionPath, str]] = []
    stack: list[tuple[SectionNode, SectionPath, str]] = [
        (section, (i,), child_section_id(i))
        for i, section in reversed(list(enumerate(sections)))
    ]
    while stack:
        section, path, section_id = stack.pop()
        assigned.append((path, section_id))
        for i in range(len(section.subsections) - 1, -1, -1):
            stack.append((
                section.subsections[i],
                (*path, i),
                child_section_id(i, section_id),
            ))
    return tuple(assigned)


def section_id_map(sections: Sequence[SectionNode]) -> dict[SectionPath, str]:
    return dict(assign_section_ids(sections))
