"""OddsAlchemist engine: race odds extraction and anomaly detection."""

__all__ = ["api", "extractor", "models", "sync_service"]
