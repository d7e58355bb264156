"""Assemble the annotated body tree for one document.

Figures come first, in image order, followed by the section tree. Section
identifiers are assigned once, up front, and looked up by section path while
the tree is assembled.
"""

from __future__ import annotations

import logging

from citemark.annotate import annotate_paragraph_result, failure_record
from citemark.config import ConversionOptions
from citemark.numbering import section_id_map
from citemark.types import (
    AnnotatedBody,
    AnnotatedParagraph,
    AnnotatedSection,
    ContentStructure,
    Err,
    FigureNode,
    ImageNode,
    ParagraphFailure,
    SectionNode,
    SectionPath,
)

log = logging.getLogger(__name__)


def figure_node(image: ImageNode) -> FigureNode:
    return FigureNode(path=image.path)


class _SectionAssembler:
    """Walks one section tree; holds per-document state for a single call."""

    def __init__(self, structure: ContentStructure, options: ConversionOptions) -> None:
        self.options = options
        self.config = options.config
        self.ids = section_id_map(structure.sections)
        self.skipped: list[ParagraphFailure] = []

    def title(self, section: SectionNode) -> str:
        return self.options.text_filter(section.title)

    def paragraph(
        self, raw: str, path: SectionPath, index: int,
    ) -> AnnotatedParagraph | None:
        cleaned = self.options.cleaner(raw)
        spans = []
        if self.options.positions is not None:
            spans = self.options.positions.get_positions(path, index)
        result = annotate_paragraph_result(
            cleaned,
            spans,
            section_path=path,
            paragraph_index=index,
            config=self.config,
            text_filter=self.options.text_filter,
        )
        if isinstance(result, Err):
            if self.config.on_error == "raise":
                raise result.error
            log.warning("Skipping paragraph: %s", result.error)
            self.skipped.append(failure_record(result.error))
            return None
        return result.value

    def section(self, section: SectionNode, path: SectionPath) -> AnnotatedSection:
        paragraphs = []
        for i, raw in enumerate(section.paragraphs):
            annotated = self.paragraph(raw, path, i)
            if annotated is not None:
                paragraphs.append(annotated)
        subsections = tuple(
            self.section(child, (*path, i))
            for i, child in enumerate(section.subsections)
        )
        return AnnotatedSection(
            section_id=self.ids[path],
            path=path,
            title=self.title(section),
            paragraphs=tuple(paragraphs),
            subsections=subsections,
        )


def convert(
    structure: ContentStructure, options: ConversionOptions | None = None,
) -> AnnotatedBody:
    """Convert a content structure into an annotated, identified body tree.

    Raises InputContractViolation / StructuralAnnotationError for the first
    bad paragraph unless ``options.config.on_error == "skip"``, in which case
    bad paragraphs are omitted and listed in ``AnnotatedBody.skipped``.
    """
    options = options or ConversionOptions()
    assembler = _SectionAssembler(structure, options)
    figures = tuple(figure_node(image) for image in options.images)
    sections = tuple(
        assembler.section(section, (i,))
        for i, section in enumerate(structure.sections)
    )
    body = AnnotatedBody(
        figures=figures,
        sections=sections,
        skipped=tuple(assembler.skipped),
    )
    log.debug(
        "Converted document: %d figures, %d sections, %d skipped paragraphs",
        len(figures), len(assembler.ids), len(body.skipped),
    )
    return body
