"""Odds parsing and support-rate utilities."""

import re
from decimal import ROUND_DOWN
from decimal import ROUND_HALF_UP
from decimal import Decimal
from decimal import InvalidOperation
from decimal import localcontext
from typing import Optional
from typing import Tuple

WIN_ODDS_PATTERN = re.compile(r"^\d+\.\d+$", re.ASCII)
PLACE_ODDS_PATTERN = re.compile(r"(\d+\.\d+)\s*-\s*(\d+\.\d+)", re.ASCII)

SUPPORT_RATE_SCALE = 10
_SUPPORT_RATE_QUANTUM = Decimal(1).scaleb(-SUPPORT_RATE_SCALE)


def _to_positive_decimal(value: str) -> Optional[Decimal]:
    try:
        result = Decimal(value)
    except InvalidOperation:
        return None
    return result if result > 0 else None


def parse_win_odds(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a win odds cell such as "5.4".

    Only a bare "digits.digits" value is accepted. Placeholders like "---",
    blanks and anything carrying extra characters yield None.
    """
    if not text:
        return None
    text = text.strip()
    if not WIN_ODDS_PATTERN.match(text):
        return None
    return _to_positive_decimal(text)


def parse_place_odds_range(text: Optional[str]) -> Tuple[Optional[Decimal], Optional[Decimal]]:
    """
    Parse a place odds range such as "1.2-1.5" or "1.2 - 1.5".

    Returns (min, max), or (None, None) when the text holds no usable range.
    """
    if not text:
        return None, None
    match = PLACE_ODDS_PATTERN.search(text)
    if not match:
        return None, None
    low = _to_positive_decimal(match.group(1))
    high = _to_positive_decimal(match.group(2))
    if low is None or high is None or low > high:
        return None, None
    return low, high


def support_rate(odds: Decimal) -> Decimal:
    """
    Market-implied win probability (1 / odds) at a fixed scale of
    SUPPORT_RATE_SCALE fractional digits, rounded half-up.
    """
    with localcontext() as ctx:
        # Truncate the wide quotient so the half-up step sees the exact digits.
        ctx.prec = 60
        ctx.rounding = ROUND_DOWN
        quotient = Decimal(1) / odds
        return quotient.quantize(_SUPPORT_RATE_QUANTUM, rounding=ROUND_HALF_UP)
