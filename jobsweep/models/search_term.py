"""Canonicalized search query and the postings it matched."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IDMixin
from .types import JSONBCompat


class SearchTerm(Base, IDMixin):
    __tablename__ = "search_terms"

    canonical_term: Mapped[str] = mapped_column(String(255), nullable=False)
    raw_term: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    filters: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONBCompat)
    search_count: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)
    last_searched_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)
    last_fetched_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("search_count >= 1", name="ck_search_terms_search_count_positive"),
    )


class JobSearchLink(Base, IDMixin):
    """Join row: a search term matched a posting. Removed with either side."""

    __tablename__ = "job_search_links"

    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    search_term_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("search_terms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relevance_score: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (UniqueConstraint("job_id", "search_term_id", name="uq_job_search_links_job_term"),)
