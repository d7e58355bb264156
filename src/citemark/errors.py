"""Exceptions raised while annotating a document.

Both concrete errors are scoped to a single paragraph and carry enough
context (section path, paragraph index, offending span) to diagnose the
input. They subclass ValueError so callers that already guard model
construction with ``except ValueError`` keep working.
"""

from __future__ import annotations

from citemark.types import CitationSpan, SectionPath


class CitemarkError(Exception):
    """Base class for annotation failures."""

    kind = "error"

    def __init__(
        self,
        message: str,
        *,
        section_path: SectionPath = (),
        paragraph_index: int = -1,
        span: CitationSpan | tuple[int, int] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.section_path = section_path
        self.paragraph_index = paragraph_index
        self.span = span

    def with_location(
        self, section_path: SectionPath, paragraph_index: int,
    ) -> CitemarkError:
        """Return a copy of this error bound to a section/paragraph."""
        return type(self)(
            self.message,
            section_path=section_path,
            paragraph_index=paragraph_index,
            span=self.span,
        )

    def __str__(self) -> str:
        if self.paragraph_index < 0:
            return self.message
        path = "/".join(str(i) for i in self.section_path) or "-"
        return f"{self.message} (section={path}, paragraph={self.paragraph_index})"


class InputContractViolation(CitemarkError, ValueError):
    """A citation span is malformed before remapping (start > end, bad index)."""

    kind = "input_contract"


class StructuralAnnotationError(CitemarkError, ValueError):
    """A remapped span falls outside the cleaned paragraph or overlaps the cursor."""

    kind = "structural"
