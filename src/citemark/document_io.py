"""JSON document loading and deterministic body snapshots.

Input layout::

    {
      "sections": [
        {"title": "Intro", "paragraphs": ["..."], "subsections": [...]}
      ],
      "images": [{"path": "img/1.png"}],
      "citations": [
        {"section": [0, 1], "paragraph": 0, "start": 12, "end": 15, "index": 2}
      ]
    }

``section`` is the path of 0-based sibling indices; ``index`` is the
zero-based bibliography entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from citemark.citations import CitationPositionIndex
from citemark.config import AnnotationConfig, ConversionOptions
from citemark.io_utils import load_json
from citemark.types import (
    AnnotatedBody,
    AnnotatedSection,
    CitationSpan,
    ContentStructure,
    CrossRefRun,
    ImageNode,
    SectionNode,
    SectionPath,
)


@dataclass(frozen=True, slots=True)
class LoadedDocument:
    structure: ContentStructure
    images: tuple[ImageNode, ...]
    positions: CitationPositionIndex

    def options(self, config: AnnotationConfig | None = None) -> ConversionOptions:
        return ConversionOptions(
            positions=self.positions,
            images=self.images,
            config=config or AnnotationConfig(),
        )


def _list_field(data: dict[str, Any], key: str, owner: str) -> list[Any]:
    """Return ``data[key]`` as a list; a missing or null key is empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{owner} {key!r} must be a list, got {type(value).__name__}")
    return value


def _section_from_dict(data: dict[str, Any]) -> SectionNode:
    if not isinstance(data, dict):
        raise ValueError(f"Section must be an object, got {type(data).__name__}")
    paragraphs = _list_field(data, "paragraphs", "Section")
    if not all(isinstance(p, str) for p in paragraphs):
        raise ValueError("Section paragraphs must be strings")
    subsections = _list_field(data, "subsections", "Section")
    return SectionNode(
        title=str(data.get("title") or ""),
        paragraphs=tuple(paragraphs),
        subsections=tuple(_section_from_dict(s) for s in subsections),
    )


def _image_from_dict(data: dict[str, Any]) -> ImageNode:
    try:
        path = data["path"]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed image record: {data!r}") from exc
    if not isinstance(path, str) or not path:
        raise ValueError(f"Malformed image record: {data!r}")
    return ImageNode(path=path)


def _citation_from_dict(data: dict[str, Any]) -> tuple[SectionPath, int, CitationSpan]:
    try:
        if not isinstance(data["section"], list):
            raise TypeError("section path must be a list")
        section_path = tuple(int(i) for i in data["section"])
        return (
            section_path,
            int(data["paragraph"]),
            CitationSpan(
                start=int(data["start"]),
                end=int(data["end"]),
                bib_index=int(data["index"]),
            ),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed citation record: {data!r}") from exc


def _paragraph_counts(sections: tuple[SectionNode, ...]) -> dict[SectionPath, int]:
    """Paragraph count per section path, for every section in the tree."""
    counts: dict[SectionPath, int] = {}
    stack: list[tuple[SectionPath, SectionNode]] = [
        ((i,), section) for i, section in enumerate(sections)
    ]
    while stack:
        path, section = stack.pop()
        counts[path] = len(section.paragraphs)
        stack.extend((path + (i,), sub) for i, sub in enumerate(section.subsections))
    return counts


def document_from_dict(data: dict[str, Any]) -> LoadedDocument:
    """Build the input model from a decoded document payload.

    Raises ValueError for malformed records and for citations whose
    section path or paragraph index does not exist in ``sections``.
    """
    if not isinstance(data, dict):
        raise ValueError("Document payload must be an object")
    sections = tuple(_section_from_dict(s) for s in _list_field(data, "sections", "Document"))
    images = tuple(_image_from_dict(img) for img in _list_field(data, "images", "Document"))
    records = [_citation_from_dict(c) for c in _list_field(data, "citations", "Document")]
    counts = _paragraph_counts(sections)
    for section_path, paragraph_index, _ in records:
        if not 0 <= paragraph_index < counts.get(section_path, 0):
            raise ValueError(
                "Citation refers to a missing paragraph: "
                f"section={'/'.join(map(str, section_path))}, paragraph={paragraph_index}"
            )
    return LoadedDocument(
        structure=ContentStructure(sections=sections),
        images=images,
        positions=CitationPositionIndex.from_records(records),
    )


def load_document(path: Path) -> LoadedDocument:
    """Load a document JSON file."""
    return document_from_dict(load_json(path))


def _section_to_dict(section: AnnotatedSection) -> dict[str, Any]:
    return {
        "id": section.section_id,
        "path": list(section.path),
        "title": section.title,
        "paragraphs": [
            {
                "index": paragraph.index,
                "runs": [
                    {"type": "xref", "text": run.text, "targets": list(run.target_ids)}
                    if isinstance(run, CrossRefRun)
                    else {"type": "text", "text": run.text}
                    for run in paragraph.runs
                ],
            }
            for paragraph in section.paragraphs
        ],
        "subsections": [_section_to_dict(child) for child in section.subsections],
    }


def body_to_dict(body: AnnotatedBody) -> dict[str, Any]:
    """Serialize a body tree for deterministic snapshots."""
    return {
        "figures": [{"path": figure.path} for figure in body.figures],
        "sections": [_section_to_dict(section) for section in body.sections],
        "skipped": [
            {
                "kind": failure.kind,
                "section_path": list(failure.section_path),
                "paragraph_index": failure.paragraph_index,
                "message": failure.message,
            }
            for failure in body.skipped
        ],
    }
