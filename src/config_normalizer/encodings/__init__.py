"""Deterministic encodings of flattened mappings.

Two encodings are registered, keyed by their ``OutputFormat`` value:

- ``"standard"``: ``PropertiesEncoding``, sorted ``key=value`` lines
- ``"xml"``:      ``XMLEncoding``, sorted ``<entry>`` elements
"""

from __future__ import annotations

from config_normalizer.config import OutputFormat
from config_normalizer.encodings.properties import PropertiesEncoding
from config_normalizer.encodings.xml_properties import XMLEncoding
from config_normalizer.protocols import Encoding

__all__ = ["ENCODINGS", "PropertiesEncoding", "XMLEncoding", "get_encoding"]

ENCODINGS: dict[OutputFormat, type[PropertiesEncoding] | type[XMLEncoding]] = {
    OutputFormat.STANDARD: PropertiesEncoding,
    OutputFormat.XML: XMLEncoding,
}


def get_encoding(fmt: OutputFormat | str) -> Encoding:
    """Return a fresh encoding instance for ``fmt``.

    Raises:
        ValueError: If ``fmt`` names no registered encoding.
    """
    try:
        key = OutputFormat(fmt)
    except ValueError:
        choices = ", ".join(sorted(str(f) for f in OutputFormat))
        msg = f"Unknown output format {fmt!r}; expected one of: {choices}"
        raise ValueError(msg) from None
    return ENCODINGS[key]()
