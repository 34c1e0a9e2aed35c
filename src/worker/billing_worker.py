"""Billing Queue Worker

Pulls billing jobs from a JobQueue and runs them through the queue's processor,
up to the queue's concurrency at a time. Runs inside the API process (memory
backend) or as a standalone script against Redis.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.job_queue_factory import create_job_queues
from src.app.services.job_queue import JobQueue
from src.domain.billing_job import BillingJob, JobState, QueueName
from .consolidated_billing_processor import ConsolidatedBillingProcessor
from .contract_billing_processor import ContractBillingProcessor
from .processor import JobProcessor

logger = logging.getLogger(__name__)


class BillingWorker:
    """
    Background worker for one billing queue

    Features:
    - At most queue.concurrency jobs in flight
    - Failed jobs keep their reason; retries follow the queue's backoff
    - drain() for one-shot runs, run_forever() for long-lived workers

    Usage:
        worker = BillingWorker(queue, ContractBillingProcessor(session_factory))
        await worker.drain()

        task = asyncio.create_task(worker.run_forever())
        ...
        await worker.shutdown()
    """

    def __init__(
        self,
        queue: JobQueue,
        processor: JobProcessor,
        poll_interval_seconds: float = 1.0,
    ):
        self.queue = queue
        self.processor = processor
        self.poll_interval_seconds = poll_interval_seconds
        self._running = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def name(self) -> str:
        return self.queue.name.value

    async def process_job(self, job: BillingJob) -> BillingJob:
        """
        Run one active job to completion or failure

        Args:
            job: Job already moved to active by fetch_next()

        Returns:
            Final (or delayed) job state; the job as fetched if the queue is unreachable
        """
        logger.info(f"[{self.name}] Processing job {job.id} ({job.name.value}), attempt {job.attempts_made}")

        try:
            await self.queue.update_progress(job.id, 10)
            result = await self.processor.process(job)
        except Exception as e:
            return await self._fail(job, str(e))

        try:
            await self.queue.complete(job.id, result)
        except Exception as e:
            logger.exception(f"[{self.name}] Could not record result of job {job.id}")
            return await self._fail(job, f"Failed to record job result: {e}")

        logger.info(f"[{self.name}] Job {job.id} completed")
        return job.model_copy(update={"state": JobState.COMPLETED, "progress": 100, "result": result})

    async def _fail(self, job: BillingJob, reason: str) -> BillingJob:
        try:
            failed = await self.queue.fail(job.id, reason)
        except Exception:
            # Job stays active on the backend until it is reachable again
            logger.exception(f"[{self.name}] Could not mark job {job.id} failed: {reason}")
            return job

        if failed.state == JobState.DELAYED:
            logger.warning(
                f"[{self.name}] Job {job.id} failed (attempt {failed.attempts_made}/"
                f"{failed.max_attempts}), retry at {failed.run_at}: {reason}"
            )
        else:
            logger.error(f"[{self.name}] Job {job.id} failed: {reason}")
        return failed

    async def drain(self) -> int:
        """
        Process waiting jobs until none are due

        Returns:
            Number of jobs processed
        """
        processed = 0
        while True:
            batch: List[BillingJob] = []
            while len(batch) < self.queue.concurrency:
                job = await self.queue.fetch_next()
                if job is None:
                    break
                batch.append(job)

            if not batch:
                return processed

            outcomes = await asyncio.gather(
                *(self.process_job(job) for job in batch), return_exceptions=True
            )
            for job, outcome in zip(batch, outcomes):
                if isinstance(outcome, Exception):
                    logger.error(f"[{self.name}] Job {job.id} aborted: {outcome!r}")
            processed += len(batch)

    async def run_forever(self):
        """Poll the queue until stop() is called"""
        logger.info(
            f"[{self.name}] Worker started (concurrency {self.queue.concurrency}, "
            f"poll {self.poll_interval_seconds}s)"
        )
        self._running = True

        while self._running:
            if len(self._tasks) >= self.queue.concurrency:
                await asyncio.wait(self._tasks, return_when=asyncio.FIRST_COMPLETED)
                continue

            try:
                job = await self.queue.fetch_next()
            except Exception as e:
                logger.error(f"[{self.name}] Failed to fetch next job: {e}")
                job = None

            if job is None:
                await asyncio.sleep(self.poll_interval_seconds)
                continue

            task = asyncio.create_task(self.process_job(job))
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"[{self.name}] Job task aborted: {task.exception()!r}")

    def stop(self):
        self._running = False

    async def shutdown(self):
        """Stop polling and wait for in-flight jobs"""
        self.stop()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.info(f"[{self.name}] Worker shutdown complete")


def build_workers(
    queues: Dict[QueueName, JobQueue],
    session_factory,
    config=ApplicationConfig,
) -> Dict[QueueName, BillingWorker]:
    """Pair each queue with its processor"""
    processors = {
        QueueName.CONTRACT_BILLING: ContractBillingProcessor(session_factory),
        QueueName.CONSOLIDATED_BILLING: ConsolidatedBillingProcessor(
            session_factory, max_depth=int(config.MAX_ACCOUNT_DEPTH)
        ),
    }
    return {
        name: BillingWorker(
            queue,
            processors[name],
            poll_interval_seconds=float(config.WORKER_POLL_INTERVAL_SECONDS),
        )
        for name, queue in queues.items()
    }


async def main(argv: Optional[List[str]] = None):
    """
    Entry point for running billing workers as a standalone script

    Usage:
        # Run both queues continuously
        python -m src.worker.billing_worker

        # Run one queue
        python -m src.worker.billing_worker --queue consolidated-billing

        # Process what is waiting and exit
        python -m src.worker.billing_worker --once
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Billing Queue Worker")
    parser.add_argument(
        "--queue",
        choices=[name.value for name in QueueName] + ["all"],
        default="all",
        help="Queue to consume",
    )
    parser.add_argument("--once", action="store_true", help="Drain waiting jobs and exit")
    args = parser.parse_args(argv)

    if str(ApplicationConfig.QUEUE_BACKEND).lower() == "memory":
        logger.warning(
            "QUEUE_BACKEND is 'memory': a standalone worker only sees jobs queued in its own process"
        )

    engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
    session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    queues = create_job_queues(ApplicationConfig)
    if args.queue != "all":
        queues = {QueueName(args.queue): queues[QueueName(args.queue)]}
    workers = build_workers(queues, session_factory)

    try:
        if args.once:
            for worker in workers.values():
                processed = await worker.drain()
                print(f"{worker.name}: {processed} job(s) processed")
        else:
            await asyncio.gather(*(worker.run_forever() for worker in workers.values()))
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Received shutdown signal")
    finally:
        for worker in workers.values():
            await worker.shutdown()
        for queue in queues.values():
            await queue.close()
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
