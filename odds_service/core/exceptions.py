# odds_service/core/exceptions.py
"""
Application-specific exceptions for the odds pipeline.

The extractor and the anomaly detector never raise for bad input; these
classes cover the collaborators around them (fetching, persisting and the
request boundary) so callers can tell a transport failure from an empty page.
"""
from typing import Optional


class OddsServiceError(Exception):
    """Base class for all custom exceptions in this application."""

    pass


class FetchError(OddsServiceError):
    """Base class for failures while retrieving a page."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"[{url}] {message}")


class FetchHttpError(FetchError):
    """Raised for unsuccessful HTTP responses and transport failures."""

    def __init__(self, status_code: int, url: str, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        message = f"Received HTTP {status_code} from {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(url, message)


class NoOddsExtractedError(OddsServiceError):
    """Raised when a page was fetched but yielded no odds rows."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No odds rows could be extracted from {url}")


class SinkError(OddsServiceError):
    """Raised when extracted rows cannot be persisted."""

    pass
