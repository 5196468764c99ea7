"""SQLAlchemy models for the Getnet settlement decoder."""

from getnet_recon.models.ingestion_run import IngestionRun

__all__ = [
    "IngestionRun",
]
