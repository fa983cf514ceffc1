"""Data models for the Paperless bridge."""

from .ingestion import (
    FailureKind,
    IngestionRequest,
    IngestionResult,
    IngestionTask,
    TaskStatus,
)

__all__ = [
    "FailureKind",
    "IngestionRequest",
    "IngestionResult",
    "IngestionTask",
    "TaskStatus",
]
