"""Character reference decoding for YouTube caption text.

WHY: Caption XML carries text with HTML/XML character references, and
YouTube double-encodes them — an apostrophe arrives as ``&amp;#39;``
rather than ``&#39;``. A single decode pass would leave ``&#39;`` in the
note; decoding until nothing changes would wrongly collapse text that was
legitimately single-encoded.

HOW: One regex pass resolves decimal, hexadecimal, and a small fixed table
of named references. decode_entities() applies that pass exactly twice.

RULES:
- Exactly two passes, never loop-to-fixpoint
- Unknown named references are left verbatim (including & and ;)
- Numeric references outside the Unicode range are left verbatim
- &nbsp; decodes to a plain space, not U+00A0
- Adjacent UTF-16 surrogate references join into one character; a lone
  surrogate stays a decimal reference so the text always encodes as UTF-8
"""

from __future__ import annotations

import re

NAMED_ENTITIES: dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
}

_ENTITY_RE = re.compile(r"&(?:#(\d+)|#x([a-fA-F0-9]+)|(\w+));")

_DECODE_PASSES = 2

_SURROGATE_PAIR_RE = re.compile(r"([\ud800-\udbff])([\udc00-\udfff])")
_LONE_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


def _replace(match: re.Match) -> str:
    dec, hex_digits, named = match.groups()
    if dec is not None:
        return _from_code_point(int(dec, 10), match.group(0))
    if hex_digits is not None:
        return _from_code_point(int(hex_digits, 16), match.group(0))
    return NAMED_ENTITIES.get(named, match.group(0))


def _from_code_point(code_point: int, original: str) -> str:
    try:
        return chr(code_point)
    except (ValueError, OverflowError):
        return original


def _combine_pair(match: re.Match) -> str:
    high, low = (ord(c) for c in match.groups())
    return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))


def _join_surrogates(text: str) -> str:
    text = _SURROGATE_PAIR_RE.sub(_combine_pair, text)
    return _LONE_SURROGATE_RE.sub(lambda m: "&#{};".format(ord(m.group(0))), text)


def decode_once(text: str) -> str:
    """Resolve every character reference in ``text`` a single time."""
    return _join_surrogates(_ENTITY_RE.sub(_replace, text))


def decode_entities(text: str) -> str:
    """Decode double-encoded character references.

    Examples:
        >>> decode_entities("Let&#39;s go")
        "Let's go"
        >>> decode_entities("&amp;#39;")
        "'"
    """
    for _ in range(_DECODE_PASSES):
        text = decode_once(text)
    return text
