"""Ingestion run model: audit trail of every settlement file parsed."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, Integer, JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column

from getnet_recon.core.database import Base


class IngestionRun(Base):
    """One parse of one settlement file.

    Only the outcome is stored (counts, establishments, diagnostics); the
    decoded records are handed to the capture pipeline and not kept here.
    """

    __tablename__ = "ingestion_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    movement_date: Mapped[Optional[str]] = mapped_column(
        String(10),
        index=True,
        comment="YYYY-MM-DD from the file header",
    )
    establishment_filter: Mapped[Optional[str]] = mapped_column(
        String(15),
        nullable=True,
    )
    total_lines: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    records_decoded: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    skipped_lines: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    establishments: Mapped[Optional[list[str]]] = mapped_column(
        JSON,
        nullable=True,
    )
    corrected_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    provisional_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    diagnostics: Mapped[Optional[list[dict[str, Any]]]] = mapped_column(
        JSON,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return (
            f"<IngestionRun(filename={self.filename!r}, "
            f"records_decoded={self.records_decoded}, "
            f"skipped_lines={self.skipped_lines})>"
        )
