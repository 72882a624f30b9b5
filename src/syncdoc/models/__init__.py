"""Result data models for merge runs."""

from syncdoc.models.results import BatchResult, FileResult, FileStatus

__all__ = ["BatchResult", "FileResult", "FileStatus"]
