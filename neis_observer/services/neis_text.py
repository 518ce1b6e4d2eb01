"""
NEIS Text Metrics
=================
Character and byte counts as the Korean National Education Information
System (NEIS) measures them for 학교생활기록부 entries.

- 글자 수: every UTF-16 code unit counts as one character
- 바이트 수: 한글/한자 and other multi-byte characters count 3 bytes,
  ASCII letters, digits, punctuation, spaces and newlines count 1 byte

The byte rule classifies a character as wide when its percent-encoded form
is longer than 4 characters. Every ASCII character encodes to at most 3
("%20"), every other code point to at least 6 ("%C3%A9"), so this is the
same as "not ASCII". NEIS compliance is defined against this exact rule,
including for emoji and CJK extension blocks.
"""
import math
from urllib.parse import quote

# Characters left as-is by component encoding
_UNRESERVED = "-_.!~*'()"

WIDE_BYTES = 3
NARROW_BYTES = 1
NEWLINE = '\n'

# Assumed share of Hangul in generated text, for pre-generation estimates only
WIDE_RATIO = 0.8
NARROW_RATIO = 0.2


def count_chars(text: str) -> int:
    """Number of UTF-16 code units; characters outside the BMP count twice."""
    return len(text.encode('utf-16-le', 'surrogatepass')) // 2


def is_wide(char: str) -> bool:
    """True when NEIS counts the character as 3 bytes."""
    if char == NEWLINE:
        return False
    return len(quote(char, safe=_UNRESERVED, errors='surrogatepass')) > 4


def count_bytes(text: str) -> int:
    total = 0
    for char in text:
        total += WIDE_BYTES if is_wide(char) else NARROW_BYTES
    return total


def count_text(text: str) -> tuple:
    """Return (char_count, byte_count) for one observation."""
    return count_chars(text), count_bytes(text)


def round_half_up(value: float) -> int:
    """Math.round semantics: halves always round up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def estimate_bytes(target_char_count: int) -> int:
    """Expected byte count for a target length, assuming 80% Hangul.

    Only used for display before generation.
    """
    wide = target_char_count * WIDE_RATIO * WIDE_BYTES
    narrow = target_char_count * NARROW_RATIO * NARROW_BYTES
    return round_half_up(wide + narrow)
