# odds_service/sync_service.py
from datetime import datetime
from typing import Optional

import structlog

from .core.exceptions import NoOddsExtractedError
from .extractor import HtmlOddsExtractor
from .fetcher import OddsFetcher
from .notifications import AlertNotifier
from .quality.anomaly_detector import AnomalyDetector
from .sink import SqliteOddsSink
from .sink import build_rows

log = structlog.get_logger(__name__)


class OddsSyncService:
    """Runs fetch, extract, detect and persist for a single odds page."""

    def __init__(
        self,
        fetcher: OddsFetcher,
        sink: SqliteOddsSink,
        extractor: Optional[HtmlOddsExtractor] = None,
        detector: Optional[AnomalyDetector] = None,
        notifier: Optional[AlertNotifier] = None,
    ):
        self.fetcher = fetcher
        self.sink = sink
        self.extractor = extractor or HtmlOddsExtractor()
        self.detector = detector or AnomalyDetector()
        self.notifier = notifier or AlertNotifier()

    async def fetch_and_save_odds(self, url: str, require_rows: bool = False) -> int:
        """
        Fetches the page at url and appends its odds rows to the sink.

        Returns the number of rows persisted. A page without odds rows returns
        0, or raises NoOddsExtractedError when require_rows is set. Fetch and
        sink failures propagate.
        """
        log.info("Start fetching odds", url=url)
        html = await self.fetcher.fetch_html(url)

        records = self.extractor.extract(html)
        if not records:
            log.warning("No odds data found", url=url)
            if require_rows:
                raise NoOddsExtractedError(url)
            return 0

        alerts = self.detector.detect(records)
        self.notifier.notify(alerts)

        rows = build_rows(records, datetime.now())
        saved = await self.sink.append_rows(rows)
        log.info("Odds saved", url=url, saved=saved, alerts=len(alerts))
        return saved
