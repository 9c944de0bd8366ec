"""Processing job records and injectable status stores."""

from .models import JobNotFoundError, JobStatus, ProcessingJob
from .store import InMemoryJobStore, JobStore, SqliteJobStore

__all__ = [
    "InMemoryJobStore",
    "JobNotFoundError",
    "JobStatus",
    "JobStore",
    "ProcessingJob",
    "SqliteJobStore",
]
