"""Initial schema — resource_documents.

Revision ID: 001_resource_documents
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_resource_documents"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "resource_documents",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("body", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_resource_documents_type", "resource_documents", ["type"])


def downgrade() -> None:
    op.drop_index("ix_resource_documents_type", table_name="resource_documents")
    op.drop_table("resource_documents")
