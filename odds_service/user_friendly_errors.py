# odds_service/user_friendly_errors.py

"""
Centralized dictionary for mapping technical exceptions to user-friendly messages.
"""

ERROR_MAP = {
    "FetchHttpError": {
        "message": "The odds page could not be retrieved.",
        "suggestion": "Check that the URL is reachable. If the site is busy, try again in a few minutes.",
    },
    "NoOddsExtractedError": {
        "message": "No odds data could be extracted from the page.",
        "suggestion": "Check the URL points to a race odds page and that its layout has not changed.",
    },
    "SinkError": {
        "message": "The odds data could not be saved.",
        "suggestion": "Check that the database path is writable and try again.",
    },
    "default": {
        "message": "An unexpected error occurred.",
        "suggestion": "Please check the application logs for more details.",
    },
}
