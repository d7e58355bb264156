"""Invalid-character filtering for text placed into output runs.

XML 1.0 only allows: #x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] |
[#x10000-#x10FFFF]. Everything else is dropped.
"""

from __future__ import annotations

import re
from collections.abc import Callable

type TextFilter = Callable[[str], str]

_INVALID_XML_RE = re.compile(
    "[^\t\n\r%s-%s%s-%s%s-%s]" % (
        chr(0x20), chr(0xD7FF), chr(0xE000), chr(0xFFFD), chr(0x10000), chr(0x10FFFF),
    )
)


def remove_invalid_xml_chars(text: str) -> str:
    """Remove characters that cannot appear in an XML 1.0 document."""
    if not text:
        return ""
    return _INVALID_XML_RE.sub("", text)
