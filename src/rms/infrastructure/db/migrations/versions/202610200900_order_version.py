"""add optimistic version counter to orders

Revision ID: 202610200900
Revises: 202610190900
Create Date: 2026-10-20 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "202610200900"
down_revision = "202610190900"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "orders",
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
    )


def downgrade() -> None:
    op.drop_column("orders", "version")
