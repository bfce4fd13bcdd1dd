"""Create users and maps tables.

Revision ID: 20261019_0900
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers
revision: str = "20261019_0900"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "maps",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description_short", sa.String(500), nullable=False, server_default=""),
        sa.Column("description_long", sa.Text(), nullable=False, server_default=""),
        # Locations as [{"lat": .., "lng": ..}, ...]
        sa.Column("data", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        # Counters
        sa.Column("plays", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("hearts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_by",
            sa.Integer(),
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        # Timestamps
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_maps_id", "maps", ["id"])
    op.create_index("ix_maps_slug", "maps", ["slug"], unique=True)
    op.create_index("ix_maps_created_by", "maps", ["created_by"])
    op.create_index("ix_maps_created_at", "maps", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_maps_created_at", table_name="maps")
    op.drop_index("ix_maps_created_by", table_name="maps")
    op.drop_index("ix_maps_slug", table_name="maps")
    op.drop_index("ix_maps_id", table_name="maps")
    op.drop_table("maps")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
