"""Billing API entry point

    python api.py
    uvicorn api:app --host 0.0.0.0 --port 8000
"""

import logging

import uvicorn
from config import ApplicationConfig
from src.api.app import create_app

logger = logging.getLogger(__name__)

app = create_app(ApplicationConfig)

if __name__ == "__main__":
    logger.info(
        f"Starting billing API on {ApplicationConfig.API_HOST}:{ApplicationConfig.API_PORT} "
        f"(queue backend: {ApplicationConfig.QUEUE_BACKEND})"
    )
    # Single process: the memory queue and in-process workers live in this interpreter
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
