"""
Property-based tests for normalization and parsing.

Uses Hypothesis to verify:
- Normalization idempotence (normalize twice = normalize once)
- Masking preserves length, so offsets line up with the raw text
- Parsing is deterministic and never raises
- Sign law: a spread written next to the opponent comes back negated
"""
from hypothesis import given, settings, strategies as st

from services.matchup_parser import get_matchup_parser
from utils.text import mask_text, normalize_text


@given(st.text(max_size=60))
def test_normalize_is_idempotent(text):
    once = normalize_text(text)
    assert normalize_text(once) == once


@given(st.text(max_size=60))
def test_normalized_text_is_plain(text):
    normalized = normalize_text(text)
    assert normalized == normalized.strip()
    assert "  " not in normalized
    assert all(ch == " " or (ch.isascii() and ch.isalnum() and not ch.isupper()) for ch in normalized)


@given(st.text(max_size=60))
def test_mask_preserves_length(text):
    assert len(mask_text(text)) == len(text)


@settings(max_examples=40, deadline=None)
@given(st.text(max_size=80))
def test_parse_is_deterministic(text):
    parser = get_matchup_parser()
    first = parser.parse(text)
    assert parser.parse(text) == first
    assert first.success == (first.parsed is not None)


PAIRS = [
    ("NBA", "Heat", "Hawks"),
    ("NFL", "Cowboys", "Eagles"),
    ("NHL", "Bruins", "Rangers"),
]


@settings(max_examples=40, deadline=None)
@given(
    st.sampled_from(PAIRS),
    st.sampled_from(["-", "+"]),
    st.sampled_from(["1", "2.5", "3.5", "7", "10.5", "14"]),
)
def test_spread_next_to_opponent_is_negated(pair, sign, number):
    league, pick, opponent = pair
    literal = float(sign + number)
    text = f"{league}: {pick} vs {opponent}, {opponent} {sign}{number}, taking {pick}"

    result = get_matchup_parser().parse(text)
    assert result.success, result.error
    assert result.parsed.pick_team.name == pick
    assert result.parsed.spread == -literal
    assert any(note.startswith("Spread adjusted to") for note in result.parsed.parsing_notes)
