"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "monuments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("criteria_txt", sa.Text(), nullable=True),
        sa.Column("danger", sa.Text(), nullable=True),
        sa.Column("date_inscribed", sa.String(50), nullable=True),
        sa.Column("extension", sa.Integer(), nullable=True),
        sa.Column("revision", sa.Integer(), nullable=True),
        sa.Column("secondary_dates", sa.Text(), nullable=True),
        sa.Column("transboundary", sa.Integer(), nullable=True),
        sa.Column("id_number", sa.Integer(), nullable=True),
        sa.Column("unique_number", sa.Integer(), nullable=True),
        sa.Column("site", sa.Text(), nullable=True),
        sa.Column("short_description", sa.Text(), nullable=True),
        sa.Column("long_description", sa.Text(), nullable=True),
        sa.Column("historical_description", sa.Text(), nullable=True),
        sa.Column("justification", sa.Text(), nullable=True),
        sa.Column("http_url", sa.String(2048), nullable=True),
        sa.Column("image_url", sa.String(2048), nullable=True),
        sa.Column("iso_code", sa.String(255), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("region", sa.String(255), nullable=True),
        sa.Column("states", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_monuments_id_number", "monuments", ["id_number"])
    op.create_index("idx_monument_unique_number", "monuments", ["unique_number"], unique=True)

    op.create_table(
        "licenses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("flickr_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_license_flickr_id", "licenses", ["flickr_id"], unique=True)

    op.create_table(
        "pictures",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("flickr_id", sa.String(64), nullable=False),
        sa.Column("monument_id", sa.String(36), sa.ForeignKey("monuments.id"), nullable=False),
        sa.Column("license_id", sa.String(36), sa.ForeignKey("licenses.id"), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_pictures_monument_id", "pictures", ["monument_id"])
    op.create_index("idx_picture_flickr_id", "pictures", ["flickr_id"], unique=True)

    op.create_table(
        "last_updates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("monument_id", sa.String(36), sa.ForeignKey("monuments.id"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_last_update_monument", "last_updates", ["monument_id"], unique=True)

    op.create_table(
        "pipeline_runs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("run_id", sa.String(36), nullable=False, unique=True),
        sa.Column(
            "status",
            sa.Enum("RUNNING", "SUCCESS", "FAILED", name="pipelinestatus"),
            nullable=False
        ),
        sa.Column("enrichment_enabled", sa.Boolean(), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("duration_seconds", sa.Float(), nullable=True),
        sa.Column("records_extracted", sa.Integer(), nullable=True),
        sa.Column("monuments_inserted", sa.Integer(), nullable=True),
        sa.Column("monuments_skipped", sa.Integer(), nullable=True),
        sa.Column("licenses_inserted", sa.Integer(), nullable=True),
        sa.Column("licenses_skipped", sa.Integer(), nullable=True),
        sa.Column("monuments_enriched", sa.Integer(), nullable=True),
        sa.Column("pictures_inserted", sa.Integer(), nullable=True),
        sa.Column("pictures_skipped", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("error_details", sa.JSON(), nullable=True),
    )
    op.create_index("ix_pipeline_runs_status", "pipeline_runs", ["status"])
    op.create_index("ix_pipeline_runs_started_at", "pipeline_runs", ["started_at"])


def downgrade():
    op.drop_table("pipeline_runs")
    op.drop_table("last_updates")
    op.drop_table("pictures")
    op.drop_table("licenses")
    op.drop_table("monuments")
    sa.Enum(name="pipelinestatus").drop(op.get_bind(), checkfirst=True)
