#!/usr/bin/env python3
"""Annotate citations and number sections for one document.

Reads a document JSON (sections, images, citation positions), converts it to
an annotated body tree and writes either a JSON snapshot or NLM ``<body>``
XML.

Usage:
    python3 scripts/annotate_document.py --input doc.json
    python3 scripts/annotate_document.py --input doc.json --format xml --output body.xml
    python3 scripts/annotate_document.py --input doc.json --config annotate.json --skip-bad-paragraphs

Structured output goes to stdout (or --output); human messages go to stderr.
Exit codes: 0 ok, 1 annotation error, 2 bad input or arguments.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from citemark.assemble import convert
from citemark.config import AnnotationConfig
from citemark.document_io import body_to_dict, load_document
from citemark.errors import CitemarkError
from citemark.io_utils import dump_json_bytes
from citemark.nlm import body_to_xml

log = logging.getLogger("annotate_document")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Annotate citation spans and number sections of a document.",
    )
    parser.add_argument("--input", required=True, type=Path, help="Document JSON")
    parser.add_argument("--config", type=Path, default=None, help="AnnotationConfig JSON")
    parser.add_argument(
        "--format", choices=("json", "xml"), default="json", help="Output format",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write here instead of stdout")
    parser.add_argument(
        "--skip-bad-paragraphs",
        action="store_true",
        help="Omit paragraphs with bad citation spans instead of failing",
    )
    parser.add_argument(
        "--numeric-targets",
        action="store_true",
        help="Order xref target ids numerically (ref2 before ref10)",
    )
    parser.add_argument("--pretty", action="store_true", help="Indent output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def load_config(args: argparse.Namespace) -> AnnotationConfig:
    config = AnnotationConfig.from_json(args.config) if args.config else AnnotationConfig()
    updates: dict[str, object] = {}
    if args.skip_bad_paragraphs:
        updates["on_error"] = "skip"
    if args.numeric_targets:
        updates["target_order"] = "numeric"
    return dataclasses.replace(config, **updates) if updates else config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args)
        document = load_document(args.input)
    except (OSError, ValueError) as exc:
        log.error("Cannot load input: %s", exc)
        return 2

    try:
        body = convert(document.structure, document.options(config))
    except CitemarkError as exc:
        log.error("Annotation failed: %s", exc)
        return 1

    if args.format == "xml":
        payload = body_to_xml(body, config, pretty=args.pretty)
    else:
        payload = dump_json_bytes(body_to_dict(body), pretty=args.pretty)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(payload + b"\n")
        log.info("Wrote %s", args.output)
    else:
        sys.stdout.buffer.write(payload)
        sys.stdout.buffer.write(b"\n")

    if body.skipped:
        log.warning("Skipped %d paragraph(s)", len(body.skipped))
    return 0


if __name__ == "__main__":
    sys.exit(main())
