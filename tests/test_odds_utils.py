from decimal import Decimal

import pytest

from odds_service.utils.odds import parse_place_odds_range
from odds_service.utils.odds import parse_win_odds
from odds_service.utils.odds import support_rate


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5.4", Decimal("5.4")),
        ("  12.0 ", Decimal("12.0")),
        ("101.5", Decimal("101.5")),
        ("5", None),
        ("---", None),
        ("", None),
        (None, None),
        ("0.0", None),
        ("1.2-1.5", None),
        ("５.４", None),
    ],
)
def test_parse_win_odds(text, expected):
    assert parse_win_odds(text) == expected


@pytest.mark.parametrize("text", ["1.2-1.5", "1.2 - 1.5", "1.2 -1.5", " 1.2-  1.5 "])
def test_parse_place_odds_range_tolerates_spacing(text):
    assert parse_place_odds_range(text) == (Decimal("1.2"), Decimal("1.5"))


@pytest.mark.parametrize("text", ["", None, "---", "1.2", "1-2", "1.5-1.2", "１.２-１.５"])
def test_parse_place_odds_range_rejects_unusable_text(text):
    assert parse_place_odds_range(text) == (None, None)


@pytest.mark.parametrize(
    "odds, expected",
    [
        (Decimal("10.0"), Decimal("0.1000000000")),
        (Decimal("3"), Decimal("0.3333333333")),
        (Decimal("1.5"), Decimal("0.6666666667")),
        (Decimal("10.01"), Decimal("0.0999000999")),
    ],
)
def test_support_rate_rounds_half_up_at_ten_places(odds, expected):
    rate = support_rate(odds)

    assert rate == expected
    assert rate.as_tuple().exponent == -10
