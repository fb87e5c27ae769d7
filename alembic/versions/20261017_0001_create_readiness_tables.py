"""create uploads, field_mappings, validation_runs and readiness_reports tables

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "uploads",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("upload_id", sa.String(length=40), nullable=False),
        sa.Column("original_filename", sa.String(length=255), nullable=False),
        sa.Column("file_type", sa.String(length=10), nullable=False),
        sa.Column("rows_parsed", sa.Integer(), nullable=False),
        sa.Column("raw_rows", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("preview_rows", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("column_types", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("country", sa.String(length=120), nullable=True),
        sa.Column("erp", sa.String(length=120), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_uploads")),
        sa.UniqueConstraint("upload_id", name=op.f("uq_uploads_upload_id")),
    )
    op.create_index("ix_uploads_status", "uploads", ["status"], unique=False)
    op.create_index("ix_uploads_created_at", "uploads", ["created_at"], unique=False)
    op.create_index("ix_uploads_expires_at", "uploads", ["expires_at"], unique=False)

    op.create_table(
        "field_mappings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("mapping_id", sa.String(length=40), nullable=False),
        sa.Column("upload_id", sa.String(length=40), nullable=False),
        sa.Column("mappings", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("auto_suggest", sa.Boolean(), nullable=False),
        sa.Column("standard_fields", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_field_mappings")),
        sa.UniqueConstraint("mapping_id", name=op.f("uq_field_mappings_mapping_id")),
        sa.ForeignKeyConstraint(
            ["upload_id"],
            ["uploads.upload_id"],
            name=op.f("fk_field_mappings_upload_id_uploads"),
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_field_mappings_upload_id", "field_mappings", ["upload_id"], unique=False)
    op.create_index("ix_field_mappings_created_at", "field_mappings", ["created_at"], unique=False)

    op.create_table(
        "validation_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("validation_id", sa.String(length=40), nullable=False),
        sa.Column("upload_id", sa.String(length=40), nullable=False),
        sa.Column("mapping_id", sa.String(length=40), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("results", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("field_mappings", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_validation_runs")),
        sa.UniqueConstraint("validation_id", name=op.f("uq_validation_runs_validation_id")),
        sa.ForeignKeyConstraint(
            ["upload_id"],
            ["uploads.upload_id"],
            name=op.f("fk_validation_runs_upload_id_uploads"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["mapping_id"],
            ["field_mappings.mapping_id"],
            name=op.f("fk_validation_runs_mapping_id_field_mappings"),
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_validation_runs_upload_id", "validation_runs", ["upload_id"], unique=False)
    op.create_index("ix_validation_runs_created_at", "validation_runs", ["created_at"], unique=False)
    op.create_index("ix_validation_runs_score", "validation_runs", ["score"], unique=False)

    op.create_table(
        "readiness_reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("report_id", sa.String(length=40), nullable=False),
        sa.Column("upload_id", sa.String(length=40), nullable=False),
        sa.Column("validation_id", sa.String(length=40), nullable=True),
        sa.Column("report_data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("format", sa.String(length=10), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("download_count", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_readiness_reports")),
        sa.UniqueConstraint("report_id", name=op.f("uq_readiness_reports_report_id")),
        sa.ForeignKeyConstraint(
            ["upload_id"],
            ["uploads.upload_id"],
            name=op.f("fk_readiness_reports_upload_id_uploads"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["validation_id"],
            ["validation_runs.validation_id"],
            name=op.f("fk_readiness_reports_validation_id_validation_runs"),
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_readiness_reports_upload_id", "readiness_reports", ["upload_id"], unique=False)
    op.create_index("ix_readiness_reports_created_at", "readiness_reports", ["created_at"], unique=False)
    op.create_index("ix_readiness_reports_format", "readiness_reports", ["format"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_readiness_reports_format", table_name="readiness_reports")
    op.drop_index("ix_readiness_reports_created_at", table_name="readiness_reports")
    op.drop_index("ix_readiness_reports_upload_id", table_name="readiness_reports")
    op.drop_table("readiness_reports")
    op.drop_index("ix_validation_runs_score", table_name="validation_runs")
    op.drop_index("ix_validation_runs_created_at", table_name="validation_runs")
    op.drop_index("ix_validation_runs_upload_id", table_name="validation_runs")
    op.drop_table("validation_runs")
    op.drop_index("ix_field_mappings_created_at", table_name="field_mappings")
    op.drop_index("ix_field_mappings_upload_id", table_name="field_mappings")
    op.drop_table("field_mappings")
    op.drop_index("ix_uploads_expires_at", table_name="uploads")
    op.drop_index("ix_uploads_created_at", table_name="uploads")
    op.drop_index("ix_uploads_status", table_name="uploads")
    op.drop_table("uploads")
