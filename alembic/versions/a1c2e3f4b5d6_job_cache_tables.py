"""job_cache_tables

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision: str = "a1c2e3f4b5d6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "jobs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("job_id", sa.String(255)),
        sa.Column("job_title", sa.String(500), nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("company_url", sa.String(2000)),
        sa.Column("job_url", sa.String(2000), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("description", sa.Text()),
        sa.Column("requirements", sa.Text()),
        sa.Column("salary", sa.String(200)),
        sa.Column("work_type", sa.String(50)),
        sa.Column("is_easy_apply", sa.Boolean(), server_default=sa.false()),
        sa.Column("applicant_count", sa.Integer()),
        sa.Column("skills", JSONB()),
        sa.Column("benefits", JSONB()),
        sa.Column("raw_data", JSONB()),
        sa.Column("posted_at", sa.DateTime(timezone=True)),
        sa.Column("posted_at_text", sa.String(100)),
        sa.Column("expires_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_jobs_expires_at", "jobs", ["expires_at"])

    op.create_table(
        "search_terms",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("canonical_term", sa.String(255), nullable=False),
        sa.Column("raw_term", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("filters", JSONB()),
        sa.Column("search_count", sa.Integer(), server_default="1", nullable=False),
        sa.Column("last_searched_at", sa.DateTime(timezone=True)),
        sa.Column("last_fetched_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("search_count >= 1", name="ck_search_terms_search_count_positive"),
    )
    op.create_index("ix_search_terms_last_searched_at", "search_terms", ["last_searched_at"])

    op.create_table(
        "job_search_links",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "search_term_id",
            UUID(as_uuid=True),
            sa.ForeignKey("search_terms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("relevance_score", sa.Float()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("job_id", "search_term_id", name="uq_job_search_links_job_term"),
    )
    op.create_index("ix_job_search_links_search_term_id", "job_search_links", ["search_term_id"])

    # Legacy table: only created where it does not already exist from the old schema.
    bind = op.get_bind()
    if not sa.inspect(bind).has_table("job_search_cache"):
        op.create_table(
            "job_search_cache",
            sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
            sa.Column("search_hash", sa.String(64), nullable=False, unique=True),
            sa.Column("keywords", sa.String(255)),
            sa.Column("location", sa.String(255)),
            sa.Column("filters", JSONB()),
            sa.Column("jobs", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
            sa.Column("total_count", sa.Integer()),
            sa.Column("expires_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )


def downgrade() -> None:
    op.drop_index("ix_job_search_links_search_term_id", table_name="job_search_links")
    op.drop_table("job_search_links")
    op.drop_index("ix_search_terms_last_searched_at", table_name="search_terms")
    op.drop_table("search_terms")
    op.drop_index("ix_jobs_expires_at", table_name="jobs")
    op.drop_table("jobs")
