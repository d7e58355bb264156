"""Serialize an annotated body tree to NLM/JATS ``<body>`` XML.

Layout::

    <body xmlns:xlink="http://www.w3.org/1999/xlink">
      <fig><graphic xlink:href="images/1.png"/></fig>
      <sec id="sec-1">
        <title>Introduction\\n</title>
        <p>As shown in <xref ref-type="bibr" rid="ref1 ref3">[1, 3]</xref>.</p>
        <sec id="sec-1-1">...</sec>
      </sec>
    </body>

Text is already filtered by the annotator; this module only builds elements.
"""

from __future__ import annotations

from lxml import etree

from citemark.config import AnnotationConfig
from citemark.types import (
    AnnotatedBody,
    AnnotatedParagraph,
    AnnotatedSection,
    CrossRefRun,
    FigureNode,
)

XLINK_NS = "http://www.w3.org/1999/xlink"
_XLINK_HREF = f"{{{XLINK_NS}}}href"

_DEFAULT_CONFIG = AnnotationConfig()


def _append_text(parent: etree._Element, text: str) -> None:
    """Append character data after the last child (or as element text)."""
    if not text:
        return
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def figure_element(figure: FigureNode) -> etree._Element:
    fig = etree.Element("fig")
    graphic = etree.SubElement(fig, "graphic")
    graphic.set(_XLINK_HREF, figure.path)
    return fig


def paragraph_element(paragraph: AnnotatedParagraph) -> etree._Element:
    p = etree.Element("p")
    for run in paragraph.runs:
        if isinstance(run, CrossRefRun):
            xref = etree.SubElement(p, "xref")
            xref.set("ref-type", "bibr")
            xref.set("rid", " ".join(run.target_ids))
            xref.text = run.text
        else:
            _append_text(p, run.text)
    return p


def section_element(
    section: AnnotatedSection, config: AnnotationConfig = _DEFAULT_CONFIG,
) -> etree._Element:
    sec = etree.Element("sec")
    sec.set("id", f"{config.section_id_prefix}{section.section_id}")
    title = etree.SubElement(sec, "title")
    title.text = section.title + config.title_suffix
    for paragraph in section.paragraphs:
        sec.append(paragraph_element(paragraph))
    for child in section.subsections:
        sec.append(section_element(child, config))
    return sec


def body_to_element(
    body: AnnotatedBody, config: AnnotationConfig = _DEFAULT_CONFIG,
) -> etree._Element:
    root = etree.Element("body", nsmap={"xlink": XLINK_NS})
    for figure in body.figures:
        root.append(figure_element(figure))
    for section in body.sections:
        root.append(section_element(section, config))
    return root


def body_to_xml(
    body: AnnotatedBody,
    config: AnnotationConfig = _DEFAULT_CONFIG,
    *,
    pretty: bool = False,
) -> bytes:
    return etree.tostring(
        body_to_element(body, config), encoding="utf-8", pretty_print=pretty,
    )
