"""Create tourism tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, destinations, attraction_categories, attractions,
       hotels and reviews with their indexes and constraints.
How:   PostgreSQL UUID primary keys (gen_random_uuid()), TIMESTAMP WITH
       TIME ZONE, JSONB for list columns.

Constraints the application relies on:
    uq_attraction_categories_name   category names are unique
    ck_reviews_single_target        exactly one of hotel_id / attraction_id
    ck_reviews_rating_range         review rating 1..5
    attractions.category_id         RESTRICT (categories in use can't be dropped)
    reviews.*_id                    CASCADE (reviews go with their listing / user)

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
        comment="Unique identifier",
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _json_list(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(),
        server_default=sa.text("'[]'::jsonb"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(320), nullable=False, comment="Login email, unique across users"),
        sa.Column("role", sa.String(20), server_default=sa.text("'user'"), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "destinations",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("location", sa.String(300), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "attraction_categories",
        _id(),
        sa.Column(
            "name",
            sa.String(100),
            nullable=False,
            comment="Display name, trimmed, unique (case-sensitive)",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(32), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_attraction_categories_name"),
    )

    op.create_table(
        "attractions",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(300), nullable=True),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        _json_list("images"),
        sa.Column("rating", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("duration", sa.String(100), nullable=True),
        sa.Column("max_visitors", sa.Integer(), nullable=True),
        sa.Column("available_slots", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["category_id"], ["attraction_categories.id"], ondelete="RESTRICT"
        ),
    )
    op.create_index("idx_attractions_created_at", "attractions", [sa.text("created_at DESC")])
    op.create_index("idx_attractions_category_id", "attractions", ["category_id"])

    op.create_table(
        "hotels",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(300), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        _json_list("images"),
        sa.Column("rating", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("price_per_night", sa.Float(), nullable=True),
        _json_list("amenities"),
        sa.Column("available_rooms", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("destination_id", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["destination_id"], ["destinations.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_hotels_created_at", "hotels", [sa.text("created_at DESC")])

    op.create_table(
        "reviews",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("hotel_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("attraction_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hotel_id"], ["hotels.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["attraction_id"], ["attractions.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "(hotel_id IS NULL) <> (attraction_id IS NULL)",
            name="ck_reviews_single_target",
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    # /user/reviews: WHERE user_id = :id ORDER BY created_at DESC
    op.create_index(
        "idx_reviews_user_id_created_at",
        "reviews",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop every table, children first. Destructive."""
    op.drop_index("idx_reviews_user_id_created_at", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("idx_hotels_created_at", table_name="hotels")
    op.drop_table("hotels")
    op.drop_index("idx_attractions_category_id", table_name="attractions")
    op.drop_index("idx_attractions_created_at", table_name="attractions")
    op.drop_table("attractions")
    op.drop_table("attraction_categories")
    op.drop_table("destinations")
    op.drop_table("users")
