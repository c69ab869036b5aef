"""Attribute text escaping per output language.

Every language escapes ``&``, ``<``, ``>``, ``"`` and ``'`` and replaces code
points that are not allowed in a document of that language with
``&#xFFFD;``. XHTML and HTML5 additionally emit HTML 4 named entities for
non-ASCII characters that have one.
"""

from html.entities import codepoint2name
from typing import Dict, Iterator

from markup_tree.shared import Language

REPLACEMENT = "&#xFFFD;"

_BASE_ENTITIES = {
    ord("&"): "&amp;",
    ord("<"): "&lt;",
    ord(">"): "&gt;",
    ord('"'): "&quot;",
    ord("'"): "&apos;",
}


def _xml_disallowed() -> Iterator[int]:
    # XML 1.0 Char production: #x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | ...
    for codepoint in range(0x20):
        if codepoint not in (0x9, 0xA, 0xD):
            yield codepoint
    yield from range(0xD800, 0xE000)
    yield 0xFFFE
    yield 0xFFFF


def _html5_disallowed() -> Iterator[int]:
    # Controls other than ASCII whitespace, surrogates and noncharacters
    for codepoint in range(0x20):
        if codepoint not in (0x9, 0xA, 0xC, 0xD):
            yield codepoint
    yield from range(0x7F, 0xA0)
    yield from range(0xD800, 0xE000)
    yield from range(0xFDD0, 0xFDF0)
    for plane in range(0x11):
        yield (plane << 16) | 0xFFFE
        yield (plane << 16) | 0xFFFF


def _named_entities() -> Dict[int, str]:
    return {
        codepoint: f"&{name};"
        for codepoint, name in codepoint2name.items()
        if codepoint > 0x7F
    }


def _build_table(language: Language) -> Dict[int, str]:
    table: Dict[int, str] = {}

    disallowed = _html5_disallowed() if language is Language.HTML5 else _xml_disallowed()
    for codepoint in disallowed:
        table[codepoint] = REPLACEMENT

    if language is not Language.XML1:
        table.update(_named_entities())

    table.update(_BASE_ENTITIES)
    return table


_TABLES: Dict[Language, Dict[int, str]] = {
    language: _build_table(language) for language in Language
}


def escape_attribute(text: str, language: Language = Language.HTML5) -> str:
    """Escape text for use inside a double-quoted attribute value.

    Args:
        text: Raw attribute text
        language: Output language selecting entity and disallowed sets

    Returns:
        Escaped text
    """
    return text.translate(_TABLES[language])


def entity_for(char: str, language: Language = Language.HTML5) -> str:
    """Return the replacement emitted for a single character."""
    return _TABLES[language].get(ord(char), char)
