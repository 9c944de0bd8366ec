"""SQLite storage for imported questions and processing jobs."""

from .repository import QuestionRepository, StorageError, StoredQuestion

__all__ = ["QuestionRepository", "StorageError", "StoredQuestion"]
