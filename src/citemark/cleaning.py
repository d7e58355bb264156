"""Default paragraph cleaner with reversible offset bookkeeping.

Deterministic transforms, applied in a single left-to-right pass:
1. Remove line-break hyphenation ("inter-\\nnational" -> "international").
2. Map line breaks, tabs and other Unicode spaces to a plain space.
3. Collapse whitespace runs to one space.
4. Drop C0 control characters, DEL and zero-width characters.
5. Strip leading and trailing whitespace.

No transform ever inserts characters, so the cleaned text is never longer
than the raw text and ``diff`` is non-negative.
"""

from __future__ import annotations

from collections.abc import Callable

from citemark.types import CleanedText

type TextCleaner = Callable[[str], CleanedText]

_ZERO_WIDTH_CHARS = frozenset({"\u200b", "\u200c", "\u200d", "\u2060", "\ufeff"})
_LINE_BREAKS = frozenset({"\n", "\r", "\u2028", "\u2029"})


def _is_space(ch: str) -> bool:
    return ch.isspace() or ch == "\u00a0"


def _is_control(ch: str) -> bool:
    code = ord(ch)
    return code < 0x20 or code == 0x7F


def _hyphenation_break_end(raw: str, i: int) -> int:
    """Return the index after a "-<break>" sequence at ``i``, or -1.

    The hyphen only counts as hyphenation when a letter precedes it and a
    letter follows the line break.
    """
    if raw[i] != "-" or i == 0 or not raw[i - 1].isalpha():
        return -1
    j = i + 1
    if j < len(raw) and raw[j] == "\r":
        j += 1
    if j < len(raw) and raw[j] == "\n":
        j += 1
    if j == i + 1:
        return -1
    if j < len(raw) and raw[j].isalpha():
        return j
    return -1


def clean_all_and_breaks(text: str) -> CleanedText:
    """Clean a raw paragraph and emit a raw -> cleaned offset table.

    ``raw_to_cleaned[i]`` is the cleaned offset where raw character ``i``
    lands, or the offset of the next surviving character when ``i`` was
    removed. The final entry equals ``len(cleaned)``.
    """
    raw = text or ""
    out: list[str] = []
    raw_to_cleaned = [0] * (len(raw) + 1)

    i = 0
    while i < len(raw):
        ch = raw[i]
        next_i = i + 1
        emitted = ""

        hyphen_end = _hyphenation_break_end(raw, i)
        if hyphen_end >= 0:
            next_i = hyphen_end
        elif ch in _LINE_BREAKS or _is_space(ch):
            if out and out[-1] != " ":
                emitted = " "
        elif ch in _ZERO_WIDTH_CHARS or _is_control(ch):
            emitted = ""
        else:
            emitted = ch

        for raw_pos in range(i, next_i):
            raw_to_cleaned[raw_pos] = len(out)
        if emitted:
            out.append(emitted)
        i = next_i

    if out and out[-1] == " ":
        out.pop()
    raw_to_cleaned[len(raw)] = len(out)
    # Offsets that pointed past a stripped trailing space now point at the end.
    limit = len(out)
    table = tuple(min(pos, limit) for pos in raw_to_cleaned)

    return CleanedText(raw_text=raw, text="".join(out), raw_to_cleaned=table)
