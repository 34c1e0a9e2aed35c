from .unit_of_work import UnitOfWork
from .job_queue import JobQueue

__all__ = [
    "UnitOfWork",
    "JobQueue",
]
