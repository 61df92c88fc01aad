"""Run the analytics API under uvicorn.

Host and port come from settings (``HOST`` / ``PORT``); ``BACKEND_PORT``
still overrides the port for launchers that set it.
"""
import os

import uvicorn

from stock_portfolios.config.settings import get_settings
from stock_portfolios.main import app


def main() -> None:
    settings = get_settings()
    port = int(os.environ.get("BACKEND_PORT", settings.port))
    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
