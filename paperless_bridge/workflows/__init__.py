"""Ingestion workflow."""

from .ingestion_workflow import IngestionWorkflow

__all__ = ["IngestionWorkflow"]
