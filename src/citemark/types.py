"""Core types for citation annotation and section numbering.

Every stage shares these types. Input types describe the document content
structure as produced upstream (raw paragraph text, citation offsets in raw
coordinates). Output types describe the annotated body tree. All dataclasses
are frozen and use slots=True; sequences are tuples.

Type hierarchy:
  SectionNode        -- Input section (title, raw paragraphs, subsections)
  ContentStructure   -- Document root owning top-level sections
  ImageNode          -- Floating image reference
  CitationSpan       -- Raw-coordinate citation range + bibliography index
  AnnotationGroup    -- Spans sharing a start offset, merged
  PlainTextRun / CrossRefRun -- Paragraph output runs
  AnnotatedParagraph / AnnotatedSection / FigureNode / AnnotatedBody
  Ok[T] / Err[E]     -- Per-paragraph Result type
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Result ADT -- per-paragraph success / failure
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success case of Result[T, E]."""
    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failure case of Result[T, E]. Keeps the typed failure reason."""
    error: E


type Result[T, E] = Ok[T] | Err[E]

# Path of 0-based sibling indices from the document root, e.g. (0, 1) is the
# second subsection of the first top-level section.
type SectionPath = tuple[int, ...]


# ---------------------------------------------------------------------------
# Input model
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SectionNode:
    """A document section: title, raw paragraphs, ordered subsections."""

    title: str
    paragraphs: tuple[str, ...] = ()
    subsections: tuple[SectionNode, ...] = ()


@dataclass(frozen=True, slots=True)
class ContentStructure:
    """Document root. Owns the top-level sections in document order."""

    sections: tuple[SectionNode, ...] = ()


@dataclass(frozen=True, slots=True)
class ImageNode:
    """Floating image, emitted as a figure before all sections."""

    path: str


@dataclass(frozen=True, slots=True)
class CitationSpan:
    """Citation marker location in raw paragraph coordinates.

    ``bib_index`` is zero-based; it renders as ``ref{bib_index + 1}``.
    Ordering and bounds violations are reported by the annotator as
    InputContractViolation so they stay scoped to one paragraph.
    """

    start: int
    end: int
    bib_index: int


@dataclass(frozen=True, slots=True)
class CleanedText:
    """Cleaned paragraph text plus the offsets needed to remap spans.

    Invariants (enforced in __post_init__):
        - len(text) <= len(raw_text)
        - raw_to_cleaned, when present, has len(raw_text) + 1 entries
    """

    raw_text: str
    text: str
    raw_to_cleaned: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if len(self.text) > len(self.raw_text):
            raise ValueError(
                f"cleaned text ({len(self.text)}) longer than raw text "
                f"({len(self.raw_text)})"
            )
        if self.raw_to_cleaned and len(self.raw_to_cleaned) != len(self.raw_text) + 1:
            raise ValueError("raw_to_cleaned length must equal len(raw_text) + 1")

    @property
    def diff(self) -> int:
        """Net character reduction performed by cleaning."""
        return len(self.raw_text) - len(self.text)


@dataclass(frozen=True, slots=True)
class AnnotationGroup:
    """One or more spans sharing a start offset.

    ``start``/``end`` come from the representative (first sorted) span and
    are still in raw coordinates. ``bib_indices`` keeps contribution order
    with duplicates removed.
    """

    start: int
    end: int
    bib_indices: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.bib_indices:
            raise ValueError("AnnotationGroup needs at least one bibliography index")


# ---------------------------------------------------------------------------
# Output model
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PlainTextRun:
    text: str


@dataclass(frozen=True, slots=True)
class CrossRefRun:
    """Inline bibliography cross-reference anchored in cleaned text."""

    text: str
    target_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.target_ids:
            raise ValueError("CrossRefRun needs at least one target id")


type Run = PlainTextRun | CrossRefRun


@dataclass(frozen=True, slots=True)
class AnnotatedParagraph:
    index: int              # Position among the section's raw paragraphs
    runs: tuple[Run, ...]

    @property
    def text(self) -> str:
        """Concatenated run text; equals the cleaned paragraph text."""
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True, slots=True)
class AnnotatedSection:
    section_id: str         # "1-2"
    path: SectionPath       # (0, 1)
    title: str
    paragraphs: tuple[AnnotatedParagraph, ...]
    subsections: tuple[AnnotatedSection, ...]


@dataclass(frozen=True, slots=True)
class FigureNode:
    path: str


@dataclass(frozen=True, slots=True)
class ParagraphFailure:
    """Why one paragraph could not be annotated."""

    kind: str               # "input_contract" | "structural"
    section_path: SectionPath
    paragraph_index: int
    message: str


@dataclass(frozen=True, slots=True)
class AnnotatedBody:
    """Assembled output: figures first, then identified sections."""

    figures: tuple[FigureNode, ...] = ()
    sections: tuple[AnnotatedSection, ...] = ()
    skipped: tuple[ParagraphFailure, ...] = field(default_factory=tuple)

    def iter_sections(self) -> list[AnnotatedSection]:
        """All sections in document (preorder) order."""
        out: list[AnnotatedSection] = []
        stack = list(reversed(self.sections))
        while stack:
            section = stack.pop()
            out.append(section)
            stack.extend(reversed(section.subsections))
        return out
