"""FastAPI application entry point.

Run with:
    uvicorn --factory goldrate.main:create_app
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from .market import create_aggregator, create_stream_router
from .market.factory import log_level, stream_interval

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the application. GOLD_LOG_LEVEL controls verbosity (default INFO)."""
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title="goldrate")
    app.include_router(create_stream_router(create_aggregator(), interval=stream_interval()))
    logger.info("goldrate app created")
    return app
