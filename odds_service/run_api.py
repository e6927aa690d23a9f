# odds_service/run_api.py

import uvicorn

from .config import get_settings


def main():
    settings = get_settings()
    uvicorn.run("odds_service.api:app", host=settings.UVICORN_HOST, port=settings.UVICORN_PORT, reload=False)


if __name__ == "__main__":
    main()
