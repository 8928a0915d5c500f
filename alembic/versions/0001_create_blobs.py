"""Create the namespaced blob table backing the key-value stores"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_blobs"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "blobs",
        sa.Column("namespace", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("key", sa.String(length=255), primary_key=True, nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_blobs_expires_at", "blobs", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_blobs_expires_at", table_name="blobs")
    op.drop_table("blobs")
