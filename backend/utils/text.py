"""Text normalization helpers shared by the alias index, resolver and parser."""
import re
import unicodedata
from functools import lru_cache
from typing import List, Pattern, Tuple


def _fold_char(ch: str) -> str:
    """Fold one character to a lowercase ASCII alphanumeric, or a space."""
    base = unicodedata.normalize("NFKD", ch)[:1].lower()
    if base.isascii() and base.isalnum():
        return base
    return " "


def mask_text(text: str) -> str:
    """
    Length-preserving normalization.

    Every character is lower-cased and accent-folded; anything that is not an
    ASCII letter or digit becomes a space. Offsets into the result line up with
    offsets into the raw text, which lets alias matches found here be compared
    with numerals found in the raw text.
    """
    if not text:
        return ""
    return "".join(_fold_char(ch) for ch in text)


def lower_text(text: str) -> str:
    """Lower-case ``text`` without changing its length."""
    if not text:
        return ""
    out = []
    for ch in text:
        low = ch.lower()
        out.append(low if len(low) == 1 else ch)
    return "".join(out)


def normalize_text(text: str) -> str:
    """
    Normalize text for alias comparison.

    - Lowercase (accents folded)
    - Punctuation stripped
    - Whitespace collapsed
    """
    if not text:
        return ""
    return " ".join(mask_text(text).split())


@lru_cache(maxsize=None)
def alias_pattern(alias: str) -> Pattern[str]:
    """Whole-word pattern for a normalized alias over masked/normalized text."""
    words = [re.escape(w) for w in alias.split()]
    return re.compile(r"(?<![a-z0-9])" + r"\s+".join(words) + r"(?![a-z0-9])")


def find_alias_spans(masked: str, alias: str) -> List[Tuple[int, int]]:
    """All whole-word occurrences of ``alias`` in masked text as (start, end)."""
    if not alias:
        return []
    return [(m.start(), m.end()) for m in alias_pattern(alias).finditer(masked)]


def format_spread(value: float) -> str:
    """Render a spread with an explicit sign: -3.5, +7."""
    return f"{value:+g}"


def possessive(name: str) -> str:
    """Possessive form of a team name: Heat's, Bills'."""
    return f"{name}'" if name.endswith("s") else f"{name}'s"
