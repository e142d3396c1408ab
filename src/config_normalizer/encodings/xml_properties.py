"""XMLEncoding: the properties XML document layout.

Produces the same document shape as ``java.util.Properties.storeToXML``::

    <?xml version="1.0" encoding="UTF-8" standalone="no"?>
    <!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">
    <properties>
    <entry key="cache.default.eviction.strategy">LRU</entry>
    </properties>

Entries are written one per line in key order and read back with
ElementTree.  Carriage returns are written as character references so that
XML line-end normalisation cannot turn them into newlines on the way back in.
Characters XML 1.0 cannot carry at all (most C0 controls) raise ``ValueError``.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from xml.sax.saxutils import escape

from config_normalizer.encodings.properties import check_mapping

__all__ = ["XMLEncoding"]

XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'
DOCTYPE = '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">\n'

_INVALID_XML_CHAR = re.compile(
    "[^\t\n\r\x20-\U0000d7ff\U0000e000-\U0000fffd\U00010000-\U0010ffff]"
)
_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}


def _check_representable(text: str, key: str) -> None:
    match = _INVALID_XML_CHAR.search(text)
    if match is not None:
        msg = (
            f"Character U+{ord(match.group()):04X} in property {key!r} "
            "cannot be represented in XML 1.0"
        )
        raise ValueError(msg)


class XMLEncoding:
    """Sorted ``<entry key="...">value</entry>`` document.  Registered as ``"xml"``."""

    name = "xml"

    def encode(self, mapping: Mapping[str, str]) -> bytes:
        parts = [XML_HEADER, DOCTYPE, "<properties>\n"]
        for key, value in check_mapping(mapping):
            _check_representable(key, key)
            _check_representable(value, key)
            parts.append(
                f'<entry key="{escape(key, _ATTR_ENTITIES)}">'
                f"{escape(value, _TEXT_ENTITIES)}</entry>\n"
            )
        parts.append("</properties>\n")
        return "".join(parts).encode("utf-8")

    def decode(self, data: bytes) -> dict[str, str]:
        """Parse a properties XML document.  ``comment`` elements are ignored."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            msg = f"Malformed properties XML: {exc}"
            raise ValueError(msg) from exc
        if root.tag != "properties":
            msg = f"Expected <properties> root element, got <{root.tag}>"
            raise ValueError(msg)

        result: dict[str, str] = {}
        for entry in root.iter("entry"):
            key = entry.get("key")
            if key is None:
                msg = "<entry> element without a key attribute"
                raise ValueError(msg)
            result[key] = entry.text or ""
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
