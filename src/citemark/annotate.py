"""Paragraph annotation: cleaned text + citation groups -> ordered runs.

The cursor walks the cleaned text left to right. For each annotation group
the plain text up to the remapped start is emitted, then a cross-reference
run covering the remapped span, and the cursor moves to the remapped end.
Whatever remains after the last group becomes a trailing plain run.

Round-trip invariant: concatenating the text of all runs reproduces the
cleaned text exactly (modulo the invalid-character filter). A span that
cannot be placed without breaking that invariant raises instead of being
clamped.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from citemark.config import AnnotationConfig
from citemark.errors import CitemarkError, InputContractViolation, StructuralAnnotationError
from citemark.filters import TextFilter, remove_invalid_xml_chars
from citemark.grouping import group_spans, target_ids
from citemark.remap import OffsetRemapper, ScalarShiftRemapper, build_remapper
from citemark.types import (
    AnnotatedParagraph,
    AnnotationGroup,
    CitationSpan,
    CleanedText,
    CrossRefRun,
    Err,
    Ok,
    ParagraphFailure,
    PlainTextRun,
    Result,
    Run,
    SectionPath,
)

_DEFAULT_CONFIG = AnnotationConfig()


def validate_spans(
    spans: Sequence[CitationSpan], *, bib_count: int | None = None,
) -> None:
    """Reject malformed spans before any remapping happens."""
    for span in spans:
        if span.start < 0 or span.end < 0:
            raise InputContractViolation(
                f"Citation span has a negative offset: [{span.start}, {span.end})",
                span=span,
            )
        if span.start > span.end:
            raise InputContractViolation(
                f"Citation span start {span.start} is after end {span.end}",
                span=span,
            )
        if span.bib_index < 0:
            raise InputContractViolation(
                f"Negative bibliography index {span.bib_index}", span=span,
            )
        if bib_count is not None and span.bib_index >= bib_count:
            raise InputContractViolation(
                f"Bibliography index {span.bib_index} out of range "
                f"(bibliography has {bib_count} entries)",
                span=span,
            )


def annotate_groups(
    text: str,
    groups: Sequence[AnnotationGroup],
    remapper: OffsetRemapper | int,
    *,
    config: AnnotationConfig = _DEFAULT_CONFIG,
    text_filter: TextFilter = remove_invalid_xml_chars,
) -> tuple[Run, ...]:
    """Turn cleaned text and ordered groups into runs.

    ``remapper`` may be a bare ``diff`` for the scalar strategy.
    """
    if isinstance(remapper, int):
        remapper = ScalarShiftRemapper(remapper)

    runs: list[Run] = []

    def plain(fragment: str) -> None:
        if fragment or config.keep_empty_runs:
            runs.append(PlainTextRun(text_filter(fragment)))

    cursor = 0
    for group in groups:
        start, end = remapper.remap_span(group.start, group.end)
        if not cursor <= start <= end <= len(text):
            raise StructuralAnnotationError(
                f"Citation span [{group.start}, {group.end}) remaps to "
                f"[{start}, {end}), outside [{cursor}, {len(text)}] of the cleaned paragraph",
                span=(group.start, group.end),
            )
        plain(text[cursor:start])
        runs.append(CrossRefRun(
            text=text_filter(text[start:end]),
            target_ids=target_ids(group, prefix=config.ref_prefix, order=config.target_order),
        ))
        cursor = end
    if runs:
        plain(text[cursor:])
    else:
        runs.append(PlainTextRun(text_filter(text)))
    return tuple(runs)


def annotate_paragraph(
    cleaned: CleanedText,
    spans: Iterable[CitationSpan],
    *,
    config: AnnotationConfig = _DEFAULT_CONFIG,
    text_filter: TextFilter = remove_invalid_xml_chars,
) -> tuple[Run, ...]:
    """Validate, group and place the citation spans of one paragraph."""
    span_list = list(spans)
    validate_spans(span_list, bib_count=config.bib_count)
    groups = group_spans(span_list)
    remapper = build_remapper(cleaned, config.remap_strategy)
    return annotate_groups(
        cleaned.text, groups, remapper, config=config, text_filter=text_filter,
    )


def annotate_paragraph_result(
    cleaned: CleanedText,
    spans: Iterable[CitationSpan],
    *,
    section_path: SectionPath,
    paragraph_index: int,
    config: AnnotationConfig = _DEFAULT_CONFIG,
    text_filter: TextFilter = remove_invalid_xml_chars,
) -> Result[AnnotatedParagraph, CitemarkError]:
    """Annotate one paragraph, returning the failure instead of raising.

    The error is bound to ``section_path``/``paragraph_index`` so callers
    can report it or re-raise it with full context.
    """
    try:
        runs = annotate_paragraph(cleaned, spans, config=config, text_filter=text_filter)
    except CitemarkError as exc:
        return Err(exc.with_location(section_path, paragraph_index))
    return Ok(AnnotatedParagraph(index=paragraph_index, runs=runs))


def failure_record(error: CitemarkError) -> ParagraphFailure:
    return ParagraphFailure(
        kind=error.kind,
        section_path=error.section_path,
        paragraph_index=error.paragraph_index,
        message=error.message,
    )
