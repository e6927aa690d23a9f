"""
Anomaly detection over successive odds snapshots of a race.

Two fixed rules are applied to every snapshot:

* support-rate surge: a runner's implied win probability (1 / win odds) rose by
  at least SUPPORT_RATE_THRESHOLD since the previous snapshot;
* rank divergence: a runner ranks at least RANK_GAP_THRESHOLD places better in
  the place market than in the win market.

The top favourites of each snapshot are ranked and remembered but never
reported, since their prices move constantly.
"""

import threading
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set, Tuple

import structlog

from ..models import AlertRecord, AlertType, OddsRecord
from ..utils.odds import support_rate

logger = structlog.get_logger(__name__)


class DetectorState:
    """
    Last observed win odds per runner identity key.

    Entries are overwritten on every snapshot and never removed. Individual
    reads and writes are lock-guarded; a whole detect() pass is not.
    """

    def __init__(self):
        self._previous_win_odds: Dict[str, Decimal] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Decimal]:
        with self._lock:
            return self._previous_win_odds.get(key)

    def update(self, entries: Iterable[Tuple[str, Decimal]]):
        with self._lock:
            for key, win_odds in entries:
                self._previous_win_odds[key] = win_odds

    def snapshot(self) -> Dict[str, Decimal]:
        with self._lock:
            return dict(self._previous_win_odds)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._previous_win_odds

    def __len__(self) -> int:
        with self._lock:
            return len(self._previous_win_odds)


class AnomalyDetector:
    """
    Detects support-rate surges and win/place rank divergence.

    One detector should track one feed; concurrent detect() calls over the
    same races must be serialised by the caller.
    """

    # Thresholds (both inclusive)
    SUPPORT_RATE_THRESHOLD = Decimal("0.02")
    RANK_GAP_THRESHOLD = 3

    EXCLUDED_FAVORITES = 3

    def __init__(self, state: Optional[DetectorState] = None):
        self.state = state if state is not None else DetectorState()
        self._latest_alerts: List[AlertRecord] = []
        self._alerts_lock = threading.Lock()

    def detect(self, records: Iterable[OddsRecord]) -> List[AlertRecord]:
        """
        Analyze one odds snapshot and return the alerts it raises.

        Records without positive win odds are ignored. The state written at
        the end of the call is only read by the next call.
        """
        valid = [r for r in records if r.win_odds is not None and r.win_odds > 0]
        alerts: List[AlertRecord] = []

        if valid:
            # sorted() is stable: equal odds keep their input order.
            by_win = sorted(valid, key=lambda r: r.win_odds)
            win_ranks = self._rank_map(by_win)
            top_keys = {r.identity_key for r in by_win[: self.EXCLUDED_FAVORITES]}

            alerts.extend(self._detect_support_rate_surge(valid, top_keys))
            alerts.extend(self._detect_rank_divergence(valid, top_keys, win_ranks))

            self.state.update((r.identity_key, r.win_odds) for r in valid)

        with self._alerts_lock:
            self._latest_alerts = list(alerts)

        if alerts:
            logger.info("Odds anomalies detected", alert_count=len(alerts), runners=len(valid))
        return alerts

    def get_latest_alerts(self) -> List[AlertRecord]:
        with self._alerts_lock:
            return list(self._latest_alerts)

    def _detect_support_rate_surge(
        self, valid: List[OddsRecord], top_keys: Set[str]
    ) -> List[AlertRecord]:
        """Logic A: (1 / current odds) - (1 / previous odds) >= threshold."""
        alerts = []
        for record in valid:
            key = record.identity_key
            if key in top_keys:
                continue

            previous_odds = self.state.get(key)
            if previous_odds is None or previous_odds <= 0:
                continue  # No baseline yet

            increase = support_rate(record.win_odds) - support_rate(previous_odds)
            if increase >= self.SUPPORT_RATE_THRESHOLD:
                alerts.append(
                    AlertRecord(
                        horse_number=record.horse_number,
                        horse_name=record.horse_name,
                        alert_type=AlertType.SUPPORT_RATE_SURGE,
                        value=increase,
                        race_name=record.race_name,
                    )
                )
                logger.info(
                    "Support rate surge detected",
                    race_name=record.race_name,
                    horse_number=record.horse_number,
                    horse_name=record.horse_name,
                    increase=str(increase),
                    previous_odds=str(previous_odds),
                    current_odds=str(record.win_odds),
                )
        return alerts

    def _detect_rank_divergence(
        self,
        valid: List[OddsRecord],
        top_keys: Set[str],
        win_ranks: Dict[str, int],
    ) -> List[AlertRecord]:
        """Logic B: win rank - place rank >= threshold."""
        by_place = sorted(
            (r for r in valid if r.place_odds_min is not None and r.place_odds_min > 0),
            key=lambda r: r.place_odds_min,
        )
        place_ranks = self._rank_map(by_place)

        alerts = []
        for record in valid:
            key = record.identity_key
            if key in top_keys:
                continue

            win_rank = win_ranks.get(key)
            place_rank = place_ranks.get(key)
            if win_rank is None or place_rank is None:
                continue  # Place odds not posted

            gap = win_rank - place_rank
            if gap >= self.RANK_GAP_THRESHOLD:
                alerts.append(
                    AlertRecord(
                        horse_number=record.horse_number,
                        horse_name=record.horse_name,
                        alert_type=AlertType.RANK_DIVERGENCE,
                        value=Decimal(gap),
                        race_name=record.race_name,
                    )
                )
                logger.info(
                    "Rank divergence detected",
                    race_name=record.race_name,
                    horse_number=record.horse_number,
                    horse_name=record.horse_name,
                    win_rank=win_rank,
                    place_rank=place_rank,
                    gap=gap,
                )
        return alerts

    @staticmethod
    def _rank_map(ordered: List[OddsRecord]) -> Dict[str, int]:
        """1-based rank by position in an already sorted list."""
        ranks = {}
        for position, record in enumerate(ordered, start=1):
            ranks[record.identity_key] = position
        return ranks
