# odds_service/extractor.py
import re
from typing import List
from typing import Optional

import structlog
from selectolax.parser import HTMLParser
from selectolax.parser import Node

from .models import OddsRecord
from .utils.odds import parse_place_odds_range
from .utils.odds import parse_win_odds
from .utils.text import clean_text
from .utils.text import node_text
from .utils.text import own_text

log = structlog.get_logger(__name__)


class HtmlOddsExtractor:
    """
    Turns a race odds page into one OddsRecord per runner row.

    The page markup is not under our control, so every lookup degrades
    gracefully: an unresolvable race name becomes "", an unparsable price
    becomes None, and a row that breaks is skipped without aborting the page.
    """

    RACE_TITLE_SELECTOR = "h2.hr-predictRaceInfo__title"
    ROW_SELECTOR = "tr.hr-tableValue__row"
    NUMBER_CELL_SELECTOR = "td.hr-tableValue__data--number"
    BRACKET_MARKER_SELECTOR = ".hr-icon__bracketNum"
    HORSE_CELL_SELECTOR = "td.hr-tableValue__data--horse"
    ODDS_CELL_SELECTOR = "td.hr-tableValue__data--odds"

    # e.g. "競馬 - 有馬記念 オッズ - スポーツナビ"
    TITLE_PATTERN = re.compile(r"競馬 - (.+?) オッズ")

    def extract(self, html: str) -> List[OddsRecord]:
        if not isinstance(html, str) or not html.strip():
            return []

        parser = HTMLParser(html)
        race_name = self._resolve_race_name(parser)
        rows = parser.css(self.ROW_SELECTOR)

        records: List[OddsRecord] = []
        for index, row in enumerate(rows):
            try:
                record = self._parse_row(row, race_name)
            except Exception:
                log.warning("Could not parse odds row, skipping.", row_index=index, exc_info=True)
                continue
            if record is not None:
                records.append(record)

        log.info(
            "Odds page parsed",
            race_name=race_name,
            records=len(records),
            rows_scanned=len(rows),
        )
        return records

    def _resolve_race_name(self, parser: HTMLParser) -> str:
        """Heading text first, then the <title> convention, else ""."""
        race_name = own_text(parser.css_first(self.RACE_TITLE_SELECTOR))
        if race_name:
            return race_name

        title = node_text(parser.css_first("title"))
        match = self.TITLE_PATTERN.search(title)
        if match:
            race_name = clean_text(match.group(1))
            if race_name:
                return race_name

        log.warning("Race name could not be resolved from page", title=title)
        return ""

    def _parse_row(self, row: Node, race_name: str) -> Optional[OddsRecord]:
        horse_number = self._horse_number(row)
        if not horse_number:
            return None

        horse_name = self._horse_name(row)
        if not horse_name:
            return None

        odds_cells = row.css(self.ODDS_CELL_SELECTOR)
        win_odds = parse_win_odds(node_text(odds_cells[0])) if len(odds_cells) > 0 else None
        place_min, place_max = (
            parse_place_odds_range(node_text(odds_cells[1])) if len(odds_cells) > 1 else (None, None)
        )

        return OddsRecord(
            race_name=race_name,
            horse_number=horse_number,
            horse_name=horse_name,
            win_odds=win_odds,
            place_odds_min=place_min,
            place_odds_max=place_max,
        )

    def _horse_number(self, row: Node) -> str:
        # The frame (bracket) number sits in a look-alike cell; only a cell
        # without the bracket marker holds the runner's own number.
        for cell in row.css(self.NUMBER_CELL_SELECTOR):
            if cell.css_first(self.BRACKET_MARKER_SELECTOR) is not None:
                continue
            return node_text(cell)
        return ""

    def _horse_name(self, row: Node) -> str:
        cell = row.css_first(self.HORSE_CELL_SELECTOR)
        if cell is None:
            return ""
        link = cell.css_first("a")
        return node_text(link if link is not None else cell)


def extract_odds(html: str) -> List[OddsRecord]:
    """Convenience wrapper around HtmlOddsExtractor().extract."""
    return HtmlOddsExtractor().extract(html)
