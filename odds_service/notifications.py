# odds_service/notifications.py

from typing import Sequence

import structlog

from .models import AlertRecord

log = structlog.get_logger(__name__)


class AlertNotifier:
    """Publishes detector alerts. Alerts are written to the structured log."""

    def notify(self, alerts: Sequence[AlertRecord]) -> int:
        for alert in alerts:
            log.warning(
                "Odds alert",
                alert_type=alert.alert_type.value,
                race_name=alert.race_name,
                horse_number=alert.horse_number,
                horse_name=alert.horse_name,
                value=float(alert.value),
            )
        return len(alerts)
