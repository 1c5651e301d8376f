"""Create bookings table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 12:00:00.000000+00:00

What:  Adds the bookings table behind the checkout flow.

Constraints the application relies on:
    ck_bookings_type_target   HOTEL rows reference a hotel, ATTRACTION rows an
                              attraction, never both
    ck_bookings_status        PENDING | CONFIRMED | CANCELLED | COMPLETED
    bookings.*_id             CASCADE (bookings go with their listing / user)

Rollback: downgrade() drops the table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique identifier",
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("hotel_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("attraction_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("check_in", sa.Date(), nullable=True),
        sa.Column("check_out", sa.Date(), nullable=True),
        sa.Column("guests", sa.Integer(), nullable=True),
        sa.Column("rooms", sa.Integer(), nullable=True),
        sa.Column("visit_date", sa.Date(), nullable=True),
        sa.Column("number_of_people", sa.Integer(), nullable=True),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("status", sa.String(20), server_default=sa.text("'PENDING'"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hotel_id"], ["hotels.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["attraction_id"], ["attractions.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "(type = 'HOTEL' AND hotel_id IS NOT NULL AND attraction_id IS NULL) OR "
            "(type = 'ATTRACTION' AND attraction_id IS NOT NULL AND hotel_id IS NULL)",
            name="ck_bookings_type_target",
        ),
        sa.CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED')",
            name="ck_bookings_status",
        ),
    )
    # /user/bookings: WHERE user_id = :id ORDER BY created_at DESC
    op.create_index(
        "idx_bookings_user_id_created_at",
        "bookings",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_bookings_user_id_created_at", table_name="bookings")
    op.drop_table("bookings")
