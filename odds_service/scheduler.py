# odds_service/scheduler.py
import asyncio
from typing import Dict
from typing import List
from typing import Optional

import structlog

from .sync_service import OddsSyncService

log = structlog.get_logger(__name__)


class OddsScrapingScheduler:
    """
    Periodically runs the odds pipeline over a fixed list of pages.
    Pages are processed one after another; a failing page is logged and the
    remaining pages still run.
    """

    def __init__(
        self,
        sync_service: OddsSyncService,
        target_urls: List[str],
        interval_seconds: int = 300,
    ):
        self.sync_service = sync_service
        self.target_urls = list(target_urls)
        self.interval_seconds = interval_seconds
        self._stop_event = asyncio.Event()

    async def scrape_all_targets(self) -> Dict[str, Optional[int]]:
        """Returns saved row counts per URL; None marks a failed URL."""
        log.info("Scheduled scrape started", url_count=len(self.target_urls))
        results: Dict[str, Optional[int]] = {}

        for url in self.target_urls:
            try:
                saved = await self.sync_service.fetch_and_save_odds(url)
                results[url] = saved
                log.info("Scrape complete", url=url, saved=saved)
            except Exception:
                results[url] = None
                log.error("Scrape failed", url=url, exc_info=True)

        log.info("Scheduled scrape finished", url_count=len(self.target_urls))
        return results

    async def run_forever(self):
        log.info("Odds scheduler started", interval_seconds=self.interval_seconds)
        while not self._stop_event.is_set():
            await self.scrape_all_targets()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue
        log.info("Odds scheduler stopped")

    def stop(self):
        self._stop_event.set()
