"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Clubs (tenants)
    op.create_table(
        "clubs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("city", sa.String(200), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("license_number", sa.String(100), nullable=True),
        sa.Column("timezone", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "user_club_roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False, index=True),
        sa.Column("role", sa.Enum("OWNER", "MANAGER", "DJ", "STAFF", name="clubrole"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "club_id", name="uq_user_club"),
    )

    # Dancer roster
    op.create_table(
        "dancers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False, index=True),
        sa.Column("stage_name", sa.String(100), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("club_id", "stage_name", name="uq_dancer_club_stage_name"),
    )

    op.create_table(
        "dancer_licenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("dancer_id", sa.Integer(), sa.ForeignKey("dancers.id"), nullable=False, index=True),
        sa.Column("license_type", sa.String(50), nullable=False),
        sa.Column("license_number", sa.String(100), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=False, index=True),
        sa.Column("issuing_authority", sa.String(200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "dancer_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("dancer_id", sa.Integer(), sa.ForeignKey("dancers.id"), nullable=False, index=True),
        sa.Column("check_in_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("check_out_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("bar_fee_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("bar_fee_amount", sa.Numeric(10, 2), nullable=True),
    )

    # Stages and DJ queues
    op.create_table(
        "stages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("max_capacity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "dj_queues",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False, index=True),
        sa.Column("stage_id", sa.Integer(), sa.ForeignKey("stages.id"), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )

    op.create_table(
        "queue_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("queue_id", sa.Integer(), sa.ForeignKey("dj_queues.id"), nullable=False),
        sa.Column("dancer_id", sa.Integer(), sa.ForeignKey("dancers.id"), nullable=False, index=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("song_title", sa.String(200), nullable=True),
        sa.Column("artist", sa.String(200), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("status", sa.Enum("ACTIVE", "CANCELLED", name="queueentrystatus"), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_queue_entries_queue_position", "queue_entries", ["queue_id", "position"])

    # VIP rooms
    op.create_table(
        "vip_rooms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("amenities", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )

    op.create_table(
        "vip_bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("vip_rooms.id"), nullable=False),
        sa.Column("dancer_id", sa.Integer(), sa.ForeignKey("dancers.id"), nullable=True),
        sa.Column("customer_name", sa.String(200), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_amount", sa.Numeric(14, 6), nullable=False),
        sa.Column("status", sa.Enum("ACTIVE", "COMPLETED", name="bookingstatus"), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_vip_bookings_room_status", "vip_bookings", ["room_id", "status"])

    # Financial ledger (append-only)
    op.create_table(
        "financial_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("transaction_type", sa.Enum("REVENUE", "EXPENSE", name="transactiontype"), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("reference", sa.String(100), nullable=True),
        sa.Column(
            "payment_method",
            sa.Enum("CASH", "CREDIT_CARD", "DEBIT_CARD", name="paymentmethod"),
            nullable=False,
        ),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
    )
    op.create_index("idx_fin_tx_club_processed", "financial_transactions", ["club_id", "processed_at"])


def downgrade() -> None:
    op.drop_index("idx_fin_tx_club_processed", table_name="financial_transactions")
    op.drop_table("financial_transactions")
    op.drop_index("idx_vip_bookings_room_status", table_name="vip_bookings")
    op.drop_table("vip_bookings")
    op.drop_table("vip_rooms")
    op.drop_index("idx_queue_entries_queue_position", table_name="queue_entries")
    op.drop_table("queue_entries")
    op.drop_table("dj_queues")
    op.drop_table("stages")
    op.drop_table("dancer_sessions")
    op.drop_table("dancer_licenses")
    op.drop_table("dancers")
    op.drop_table("user_club_roles")
    op.drop_table("clubs")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
