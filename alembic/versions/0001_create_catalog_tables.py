"""create data_sources and data_rows

Revision ID: 0001
Revises:
Create Date: 2024-01-10 08:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "data_sources",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("row_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_refresh", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_data_sources_created_at", "data_sources", ["created_at"])

    op.create_table(
        "data_rows",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "data_source_id",
            sa.Uuid(),
            sa.ForeignKey("data_sources.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("json_data", sa.JSON(), nullable=False),
        sa.Column("row_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_data_rows_data_source_id", "data_rows", ["data_source_id"])
    op.create_index("idx_data_rows_created_at", "data_rows", ["created_at"])


def downgrade():
    op.drop_index("idx_data_rows_created_at", table_name="data_rows")
    op.drop_index("idx_data_rows_data_source_id", table_name="data_rows")
    op.drop_table("data_rows")
    op.drop_index("idx_data_sources_created_at", table_name="data_sources")
    op.drop_table("data_sources")
