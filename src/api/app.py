"""FastAPI application factory"""

import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapter.services.job_queue_factory import create_job_queues
from src.api.error import ClientError, client_error_handler
from src.api.middleware import RequestLoggingMiddleware
from src.api.routes.billing import router as billing_router
from src.api.routes.contracts import router as contracts_router

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the API

    Billing queues are created here so routes can enqueue without the
    lifespan having run; workers only start inside the lifespan.
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        sentry_sdk.init(
            dsn=config.DSN_SENTRY,
            environment=config.SENTRY_ENVIRONMENT,
            traces_sample_rate=0.1,
        )

    queues = create_job_queues(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        workers = {}
        tasks = []
        if config.RUN_WORKERS_IN_PROCESS:
            from src.depends import AsyncSessionLocal
            from src.worker.billing_worker import build_workers

            workers = build_workers(queues, AsyncSessionLocal, config)
            tasks = [asyncio.create_task(worker.run_forever()) for worker in workers.values()]
            logger.info(f"Started {len(tasks)} in-process billing worker(s)")

        yield

        for worker in workers.values():
            worker.stop()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        for worker in workers.values():
            await worker.shutdown()
        for queue in queues.values():
            await queue.close()

    app = FastAPI(title="Contract Billing Service", lifespan=lifespan)
    app.state.queues = queues

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ClientError, client_error_handler)

    app.include_router(billing_router)
    app.include_router(contracts_router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
