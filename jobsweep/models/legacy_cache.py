"""Pre-migration search cache: one row per search with the postings inlined as JSON.

Superseded by jobs/search_terms/job_search_links. Kept until every consumer reads
from the new tables, then dropped.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IDMixin
from .types import JSONBCompat


class JobSearchCache(Base, IDMixin):
    __tablename__ = "job_search_cache"

    search_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    keywords: Mapped[Optional[str]] = mapped_column(String(255))
    location: Mapped[Optional[str]] = mapped_column(String(255))
    filters: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONBCompat)
    jobs: Mapped[List[Dict[str, Any]]] = mapped_column(JSONBCompat, default=list, nullable=False)
    total_count: Mapped[Optional[int]] = mapped_column(Integer)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
