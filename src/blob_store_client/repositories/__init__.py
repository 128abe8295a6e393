from .query_executor import QueryExecutor, RetryPolicy, StatementResult, AttemptKind, Attempt
from .file_repository import FileRepository
from .filesystem import LocalFilesystem, FileTimes

__all__ = [
    "QueryExecutor",
    "RetryPolicy",
    "StatementResult",
    "AttemptKind",
    "Attempt",
    "FileRepository",
    "LocalFilesystem",
    "FileTimes",
]
