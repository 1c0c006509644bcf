"""Character sets for O(1) classification.

All sets are frozensets for:
- O(1) membership testing (vs O(n) for strings)
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Usage:
    from gotita.parsing.charsets import ASCII_PUNCTUATION

    if char in ASCII_PUNCTUATION:  # O(1) lookup
        ...
"""

# Characters a backslash can escape
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

# Characters that make the inline tokenizer stop and look closer
INLINE_SPECIAL: frozenset[str] = frozenset("\\`[]!<{_*^~=+-\"'$:.\n ")

# Emphasis-like delimiters that work bare as well as braced
BARE_DELIMITERS: frozenset[str] = frozenset("_*^~\"'")

# Delimiters that only work in braced form: {=mark=} {+ins+} {-del-}
BRACED_ONLY_DELIMITERS: frozenset[str] = frozenset("=+-")

ALL_DELIMITERS: frozenset[str] = BARE_DELIMITERS | BRACED_ONLY_DELIMITERS

# Block markers
FENCE_CHARS: frozenset[str] = frozenset("`~")
THEMATIC_BREAK_CHARS: frozenset[str] = frozenset("*-")
BULLET_MARKERS: frozenset[str] = frozenset("-+*")

# Roman numeral digits (lower case; upper case is handled by the caller)
ROMAN_DIGITS: frozenset[str] = frozenset("ivxlcdm")

# Characters allowed in a :symbol: alias
SYMBOL_CHARS: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+-"
)
