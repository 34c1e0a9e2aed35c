from .unit_of_work import SqlAlchemyUnitOfWork
from .in_memory_job_queue import InMemoryJobQueue
from .redis_job_queue import RedisJobQueue
from .job_queue_factory import create_job_queue, create_job_queues

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryJobQueue",
    "RedisJobQueue",
    "create_job_queue",
    "create_job_queues",
]
