"""Baseline schema - daily counts and detections

Revision ID: 5c1e0d2a9b47
Revises:
Create Date: 2026-10-19 09:12:44.103512

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1e0d2a9b47"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "daily_counts",
        sa.Column("species_code", sa.String(length=64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("common_name", sa.String(length=100), nullable=True),
        sa.Column("scientific_name", sa.String(length=100), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("thumbnail_url", sa.String(), nullable=True),
        sa.Column("png_url", sa.String(), nullable=True),
        sa.Column("almost_certain", sa.Integer(), nullable=False),
        sa.Column("very_likely", sa.Integer(), nullable=False),
        sa.Column("uncertain", sa.Integer(), nullable=False),
        sa.Column("unlikely", sa.Integer(), nullable=False),
        sa.Column("total_detections", sa.Integer(), nullable=False),
        sa.Column("latest_detection_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("species_code", "date"),
    )
    op.create_index("idx_daily_counts_date", "daily_counts", ["date"])

    op.create_table(
        "detections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("species_code", sa.String(length=64), nullable=False),
        sa.Column("common_name", sa.String(length=100), nullable=False),
        sa.Column("scientific_name", sa.String(length=100), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("thumbnail_url", sa.String(), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=True),
        sa.Column("detected_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_rare", sa.Boolean(), nullable=False),
        sa.Column("station_id", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_detections_id", "detections", ["id"])
    op.create_index("ix_detections_species_code", "detections", ["species_code"])
    op.create_index("idx_detections_detected_at", "detections", ["detected_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_detections_detected_at", table_name="detections")
    op.drop_index("ix_detections_species_code", table_name="detections")
    op.drop_index("ix_detections_id", table_name="detections")
    op.drop_table("detections")
    op.drop_index("idx_daily_counts_date", table_name="daily_counts")
    op.drop_table("daily_counts")
