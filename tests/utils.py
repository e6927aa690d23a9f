# tests/utils.py
from decimal import Decimal
from typing import Optional

from odds_service.models import OddsRecord

RACE = "第1回東京1レース"


def build_page(race_name: str, rows: str, heading: bool = True, title: bool = True) -> str:
    """An odds page laid out like the source site's race odds table."""
    title_tag = f"<title>競馬 - {race_name} オッズ - スポーツナビ</title>" if title else ""
    heading_tag = (
        f"""
        <h2 class="hr-predictRaceInfo__title">
          {race_name}
          <span class="hr-label hr-label--g2">GII</span>
        </h2>
        """
        if heading
        else ""
    )
    return f"""
    <html>
      <head>{title_tag}</head>
      <body>
        <h1 class="hr-style--hidden">スポーツナビ</h1>
        {heading_tag}
        <table class="hr-tableValue">
          <thead>
            <tr>
              <th class="hr-tableValue__head--number">枠番</th>
              <th class="hr-tableValue__head--number">馬番</th>
              <th class="hr-tableValue__head--horse">馬名</th>
              <th class="hr-tableValue__head--odds">単勝</th>
              <th class="hr-tableValue__head--odds">複勝</th>
            </tr>
          </thead>
          <tbody>
            {rows}
          </tbody>
        </table>
      </body>
    </html>
    """


def horse_row(frame: int, number: int, name: str, win: str, place: str) -> str:
    return f"""
    <tr class="hr-tableValue__row">
      <td class="hr-tableValue__data hr-tableValue__data--number">
        <span class="hr-icon__bracketNum hr-icon__bracketNum--{frame}">{frame}</span>
      </td>
      <td class="hr-tableValue__data hr-tableValue__data--number">{number}</td>
      <td class="hr-tableValue__data hr-tableValue__data--horse">
        <a href="/keiba/directory/horse/dummy/">{name}</a>
      </td>
      <td class="hr-tableValue__data hr-tableValue__data--odds"><span>{win}</span></td>
      <td class="hr-tableValue__data hr-tableValue__data--odds"><span>{place}</span></td>
    </tr>
    """


def odds(
    number: str,
    name: str,
    win: Optional[str],
    place_min: Optional[str] = None,
    place_max: Optional[str] = None,
    race: str = RACE,
) -> OddsRecord:
    """Builds an OddsRecord from decimal strings."""
    return OddsRecord(
        race_name=race,
        horse_number=number,
        horse_name=name,
        win_odds=Decimal(win) if win is not None else None,
        place_odds_min=Decimal(place_min) if place_min is not None else None,
        place_odds_max=Decimal(place_max) if place_max is not None else None,
    )
