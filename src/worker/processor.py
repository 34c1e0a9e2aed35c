"""Job processor contract shared by the billing workers"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from libs.result import Error
from src.domain.billing_job import BillingJob


class BillingJobError(Exception):
    """A job whose use case returned an error; the message becomes the failed reason"""

    def __init__(self, error: Error):
        self.error = error
        super().__init__(f"{error.code}: {error.message}")


class JobProcessor(ABC):
    """Runs one job type family against a fresh database session per job"""

    @abstractmethod
    async def process(self, job: BillingJob) -> Dict[str, Any]:
        """
        Execute the job

        Returns:
            JSON-serializable result stored on the completed job

        Raises:
            BillingJobError: The use case returned an error
            NotImplementedError: Job type has no handler yet
        """
        pass
