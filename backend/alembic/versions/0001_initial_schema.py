"""initial schema: venues, bookings, blocked_dates, peak_hours, events

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
        "venues",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("location", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("type", sa.Text(), nullable=False, server_default=sa.text("'football'")),
        sa.Column("price_per_hour", sa.Numeric(10, 2), nullable=False),
        sa.Column("opening_time", sa.Time(), nullable=False),
        sa.Column("closing_time", sa.Time(), nullable=False),
        sa.Column("slot_interval", sa.Integer(), nullable=False, server_default=sa.text("60")),
        sa.Column("max_players", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column("min_hours", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("max_hours", sa.Integer(), nullable=False, server_default=sa.text("4")),
        sa.Column("is_weekday_pricing_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("weekday_morning_start", sa.Time()),
        sa.Column("weekday_evening_start", sa.Time()),
        sa.Column("weekday_morning_price", sa.Numeric(10, 2)),
        sa.Column("weekday_evening_price", sa.Numeric(10, 2)),
        sa.Column("is_weekend_pricing_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("weekend_morning_start", sa.Time()),
        sa.Column("weekend_evening_start", sa.Time()),
        sa.Column("weekend_morning_price", sa.Numeric(10, 2)),
        sa.Column("weekend_evening_price", sa.Numeric(10, 2)),
        sa.Column("is_disabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("disabled_reason", sa.Text()),
        sa.Column("image_url", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_breakup", sa.JSON()),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("payment_method", sa.Text(), nullable=False, server_default=sa.text("'online'")),
        sa.Column("customer_name", sa.Text()),
        sa.Column("customer_phone", sa.Text()),
        sa.Column("customer_email", sa.Text()),
        sa.Column("cancel_reason", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_bookings_venue_date", "bookings", ["venue_id", "date"])

    op.create_table(
        "blocked_dates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date()),
        sa.Column("blocked_ranges", sa.JSON()),
        sa.Column("blocked_times", sa.JSON()),
        sa.Column("reason", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "peak_hours",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("days_of_week", sa.JSON()),
        sa.Column("specific_date", sa.Date()),
        sa.Column("start_time", sa.Text(), nullable=False),
        sa.Column("end_time", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("max_participants", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'upcoming'")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
    )


def downgrade():
    op.drop_table("events")
    op.drop_table("peak_hours")
    op.drop_table("blocked_dates")
    op.drop_index("ix_bookings_venue_date", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("venues")
