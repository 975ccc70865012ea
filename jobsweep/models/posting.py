"""Cached job posting scraped from an external board."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IDMixin, TimestampMixin
from .types import JSONBCompat


class Posting(Base, IDMixin, TimestampMixin):
    __tablename__ = "jobs"

    job_id: Mapped[Optional[str]] = mapped_column(String(255))
    job_title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    company_url: Mapped[Optional[str]] = mapped_column(String(2000))
    job_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    requirements: Mapped[Optional[str]] = mapped_column(Text)
    salary: Mapped[Optional[str]] = mapped_column(String(200))
    work_type: Mapped[Optional[str]] = mapped_column(String(50))
    is_easy_apply: Mapped[Optional[bool]] = mapped_column(Boolean, default=False)
    applicant_count: Mapped[Optional[int]] = mapped_column(Integer)
    skills: Mapped[Optional[List[str]]] = mapped_column(JSONBCompat)
    benefits: Mapped[Optional[List[str]]] = mapped_column(JSONBCompat)
    raw_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONBCompat)
    posted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    posted_at_text: Mapped[Optional[str]] = mapped_column(String(100))
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)
