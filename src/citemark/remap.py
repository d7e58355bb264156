"""Raw-text -> cleaned-text offset remapping.

Two strategies:

- ``ScalarShiftRemapper`` subtracts the paragraph's length delta (``diff``)
  from every offset. It is only exact when everything the cleaner removed
  lies before the first citation span; this is the compatible default.
- ``OffsetTableRemapper`` looks offsets up in the cleaner's per-character
  ``raw_to_cleaned`` table and stays exact wherever cleaning removed text.

Neither strategy clips. Out-of-range results are passed through so the
annotator can fail fast with the offending coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from citemark.types import CleanedText

type RemapStrategy = Literal["scalar", "table"]


def remap_offset(offset: int, diff: int) -> int:
    """Translate one raw offset to cleaned coordinates by a uniform shift."""
    return offset - diff


class OffsetRemapper(Protocol):
    def remap_span(self, start: int, end: int) -> tuple[int, int]: ...


@dataclass(frozen=True, slots=True)
class ScalarShiftRemapper:
    diff: int

    def remap_span(self, start: int, end: int) -> tuple[int, int]:
        return remap_offset(start, self.diff), remap_offset(end, self.diff)


@dataclass(frozen=True, slots=True)
class OffsetTableRemapper:
    """Exact remapping through a ``len(raw) + 1`` offset table.

    Offsets outside ``[0, len(raw)]`` have no table entry; they are shifted
    past the table's end so the bounds check downstream still rejects them.
    """

    raw_to_cleaned: tuple[int, ...]

    def _lookup(self, offset: int) -> int:
        if offset < 0:
            return offset
        if offset >= len(self.raw_to_cleaned):
            overshoot = offset - (len(self.raw_to_cleaned) - 1)
            return self.raw_to_cleaned[-1] + overshoot
        return self.raw_to_cleaned[offset]

    def remap_span(self, start: int, end: int) -> tuple[int, int]:
        return self._lookup(start), self._lookup(end)


def build_remapper(cleaned: CleanedText, strategy: RemapStrategy = "scalar") -> OffsetRemapper:
    """Pick the remapper for one paragraph.

    The table strategy needs a cleaner that records ``raw_to_cleaned``;
    without one it is an input error, not a silent fallback.
    """
    if strategy == "scalar":
        return ScalarShiftRemapper(cleaned.diff)
    if strategy == "table":
        if not cleaned.raw_to_cleaned:
            raise ValueError(
                "remap_strategy 'table' requires a cleaner that emits raw_to_cleaned"
            )
        return OffsetTableRemapper(cleaned.raw_to_cleaned)
    raise ValueError(f"Unknown remap strategy: {strategy!r}")
