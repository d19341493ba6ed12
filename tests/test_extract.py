from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from oddswatch.extract import Signal, extract_odds, extract_signal


@pytest.mark.parametrize("text", ["2,35 @odds", "2.35", "  2.35x", "Odds: 2.35", "\n2,35\n"])
def test_locale_variants_normalize(text):
    assert extract_odds(text) == "2.35"


@pytest.mark.parametrize("text", [None, "", "   ", "no digits here", ".,.,"])
def test_absent(text):
    assert extract_odds(text) is None
    assert extract_signal(text) is None


def test_second_separator_stops():
    assert extract_odds("2.3.5") == "2.3"
    assert extract_odds("1,5,0") == "1.5"


def test_leading_separator_ignored():
    assert extract_odds(".75") == "75"
    assert extract_odds(", 1.9") == "1.9"


def test_digits_only_kept_as_is():
    assert extract_odds("235") == "235"


def test_trailing_separator_dropped():
    assert extract_odds("2. Team A") == "2"


def test_stops_at_first_non_digit_after_run():
    assert extract_odds("12/5 and 3.4") == "12"
    assert extract_odds("1.85 (2.10)") == "1.85"


def test_signal_keeps_origin():
    sig = extract_signal("Over 2,5 @ 1.90")
    assert sig == Signal(text="2.5", source="Over 2,5 @ 1.90")
    assert sig.value == Decimal("2.5")
    assert str(sig) == "2.5"


def test_deterministic():
    assert extract_signal("x 3,10 y") == extract_signal("x 3,10 y")


noise = st.text(alphabet=st.characters(blacklist_characters="0123456789.,"), max_size=12)
numbers = st.builds(
    lambda whole, frac, sep: f"{whole}{sep}{frac}" if frac is not None else str(whole),
    st.integers(min_value=0, max_value=9999),
    st.one_of(st.none(), st.text(alphabet="0123456789", min_size=1, max_size=4)),
    st.sampled_from([".", ","]),
)


@given(prefix=noise, token=numbers, suffix=noise)
def test_noise_around_token_does_not_matter(prefix, token, suffix):
    assert extract_odds(prefix + token + suffix) == extract_odds(token)


@given(token=numbers)
def test_comma_and_dot_agree(token):
    assert extract_odds(token.replace(",", ".")) == extract_odds(token.replace(".", ","))
