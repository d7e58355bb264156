"""citemark: citation annotation and hierarchical section numbering."""

from citemark.annotate import annotate_groups, annotate_paragraph, annotate_paragraph_result
from citemark.assemble import convert
from citemark.citations import CitationPositionIndex, CitationPositionSource
from citemark.cleaning import clean_all_and_breaks
from citemark.config import AnnotationConfig, ConversionOptions
from citemark.errors import CitemarkError, InputContractViolation, StructuralAnnotationError
from citemark.grouping import group_spans, target_ids
from citemark.numbering import assign_section_ids, child_section_id
from citemark.remap import OffsetTableRemapper, ScalarShiftRemapper, remap_offset
from citemark.types import (
    AnnotatedBody,
    AnnotatedParagraph,
    AnnotatedSection,
    AnnotationGroup,
    CitationSpan,
    CleanedText,
    ContentStructure,
    CrossRefRun,
    FigureNode,
    ImageNode,
    PlainTextRun,
    SectionNode,
)

__all__ = [
    "AnnotatedBody",
    "AnnotatedParagraph",
    "AnnotatedSection",
    "AnnotationConfig",
    "AnnotationGroup",
    "CitationPositionIndex",
    "CitationPositionSource",
    "CitationSpan",
    "CitemarkError",
    "CleanedText",
    "ContentStructure",
    "ConversionOptions",
    "CrossRefRun",
    "FigureNode",
    "ImageNode",
    "InputContractViolation",
    "OffsetTableRemapper",
    "PlainTextRun",
    "ScalarShiftRemapper",
    "SectionNode",
    "StructuralAnnotationError",
    "annotate_groups",
    "annotate_paragraph",
    "annotate_paragraph_result",
    "assign_section_ids",
    "child_section_id",
    "clean_all_and_breaks",
    "convert",
    "group_spans",
    "remap_offset",
    "target_ids",
]
