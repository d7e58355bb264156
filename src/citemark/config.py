"""Conversion configuration.

``AnnotationConfig`` holds the tunable behaviour of the annotator, the
assembler and the NLM writer. ``ConversionOptions`` bundles it with the
per-document collaborators (citation positions, images, cleaner, filter)
that are passed explicitly to ``convert``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import orjson

from citemark.citations import CitationPositionSource
from citemark.cleaning import TextCleaner, clean_all_and_breaks
from citemark.filters import TextFilter, remove_invalid_xml_chars
from citemark.grouping import TargetOrder
from citemark.remap import RemapStrategy
from citemark.types import ImageNode

type ErrorPolicy = Literal["raise", "skip"]

_REMAP_STRATEGIES: frozenset[str] = frozenset({"scalar", "table"})
_TARGET_ORDERS: frozenset[str] = frozenset({"lexicographic", "numeric"})
_ERROR_POLICIES: frozenset[str] = frozenset({"raise", "skip"})


@dataclass(frozen=True, slots=True)
class AnnotationConfig:
    """Annotation and serialization settings.

    Defaults reproduce the established output: scalar ``diff`` remapping,
    string-sorted target ids, fail on the first bad paragraph.
    """
    remap_strategy: RemapStrategy = "scalar"
    target_order: TargetOrder = "lexicographic"
    keep_empty_runs: bool = False
    on_error: ErrorPolicy = "raise"
    ref_prefix: str = "ref"
    section_id_prefix: str = "sec-"
    title_suffix: str = "\n"
    bib_count: int | None = None    # Known bibliography size; None skips the range check

    def __post_init__(self) -> None:
        for name in ("ref_prefix", "section_id_prefix", "title_suffix"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string, got {getattr(self, name)!r}")
        if not isinstance(self.keep_empty_runs, bool):
            raise ValueError(f"keep_empty_runs must be a boolean, got {self.keep_empty_runs!r}")
        # bool is an int subclass; JSON true/false is not a count
        if self.bib_count is not None and (
            not isinstance(self.bib_count, int) or isinstance(self.bib_count, bool)
        ):
            raise ValueError(f"bib_count must be an integer, got {self.bib_count!r}")
        if not isinstance(self.remap_strategy, str) or self.remap_strategy not in _REMAP_STRATEGIES:
            raise ValueError(f"Invalid remap_strategy: {self.remap_strategy!r}")
        if not isinstance(self.target_order, str) or self.target_order not in _TARGET_ORDERS:
            raise ValueError(f"Invalid target_order: {self.target_order!r}")
        if not isinstance(self.on_error, str) or self.on_error not in _ERROR_POLICIES:
            raise ValueError(f"Invalid on_error: {self.on_error!r}")
        if not self.ref_prefix:
            raise ValueError("ref_prefix cannot be empty")
        if self.bib_count is not None and self.bib_count < 0:
            raise ValueError(f"bib_count must be >= 0, got {self.bib_count}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnnotationConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> AnnotationConfig:
        """Load from a JSON config file."""
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, dict):
            raise ValueError(f"Config file must hold a JSON object: {path}")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """Per-document collaborators for one conversion."""
    positions: CitationPositionSource | None = None
    images: tuple[ImageNode, ...] = ()
    config: AnnotationConfig = field(default_factory=AnnotationConfig)
    cleaner: TextCleaner = clean_all_and_breaks
    text_filter: TextFilter = remove_invalid_xml_chars
