# backend/alembic/versions/001_studio_schema.py
"""Initial schema - catalog, bookings, giftcards, timecards, deliveries, inquiries

Revision ID: 001_studio_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

All tables are created in their final form. Status columns are VARCHAR with
CHECK constraints instead of native ENUM types.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_studio_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=True,
    )


def upgrade() -> None:
    """Create the studio schema."""
    print("Creating catalog tables...")

    op.create_table(
        "products",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(40), nullable=False, server_default="SINGLE_CLASS"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("sessions", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("details", JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price >= 0", name="check_product_price_non_negative"),
        sa.CheckConstraint("sessions > 0", name="check_product_sessions_positive"),
        comment="Sellable class packages, experiences and subscriptions",
    )
    op.create_index("ix_products_id", "products", ["id"])
    op.create_index("ix_products_type", "products", ["type"])

    op.create_table(
        "instructors",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("color_scheme", sa.String(40), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_instructors_id", "instructors", ["id"])

    op.create_table(
        "studio_settings",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", JSONB(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("key"),
        comment="Weekly template, schedule overrides and class capacities",
    )

    print("Creating giftcard tables...")

    op.create_table(
        "giftcard_requests",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("buyer_name", sa.String(200), nullable=False),
        sa.Column("buyer_email", sa.String(255), nullable=False),
        sa.Column("recipient_name", sa.String(200), nullable=False),
        sa.Column("recipient_email", sa.String(255), nullable=True),
        sa.Column("recipient_whatsapp", sa.String(40), nullable=True),
        sa.Column("buyer_message", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("code", sa.String(40), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("approved_by", sa.String(120), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.String(120), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("metadata", JSONB(), nullable=False, server_default="{}"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount > 0", name="check_giftcard_request_amount_positive"),
    )
    op.create_index("ix_giftcard_requests_id", "giftcard_requests", ["id"])
    op.create_index("ix_giftcard_requests_buyer_email", "giftcard_requests", ["buyer_email"])
    op.create_index("ix_giftcard_requests_code", "giftcard_requests", ["code"])
    op.create_index("ix_giftcard_requests_status", "giftcard_requests", ["status"])

    op.create_table(
        "giftcards",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("code", sa.String(40), nullable=False),
        sa.Column("initial_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("balance", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("giftcard_request_id", sa.String(26), nullable=True),
        sa.Column("buyer_info", JSONB(), nullable=True),
        sa.Column("recipient_info", JSONB(), nullable=True),
        sa.Column("redeemed_history", JSONB(), nullable=False, server_default="[]"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["giftcard_request_id"], ["giftcard_requests.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("balance >= 0", name="check_giftcard_balance_non_negative"),
    )
    op.create_index("ix_giftcards_id", "giftcards", ["id"])
    op.create_index("ix_giftcards_code", "giftcards", ["code"], unique=True)

    op.create_table(
        "giftcard_holds",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("giftcard_id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["giftcard_id"], ["giftcards.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount > 0", name="check_hold_amount_positive"),
    )
    op.create_index("ix_giftcard_holds_id", "giftcard_holds", ["id"])
    op.create_index("ix_giftcard_holds_giftcard_id", "giftcard_holds", ["giftcard_id"])
    op.create_index("ix_giftcard_holds_expires_at", "giftcard_holds", ["expires_at"])

    op.create_table(
        "giftcard_audit",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("giftcard_id", sa.String(26), nullable=True),
        sa.Column("hold_id", sa.String(26), nullable=True),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="success"),
        sa.Column("amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("metadata", JSONB(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        comment="Append-only trail of giftcard balance movements",
    )
    op.create_index("ix_giftcard_audit_id", "giftcard_audit", ["id"])
    op.create_index("ix_giftcard_audit_giftcard_id", "giftcard_audit", ["giftcard_id"])

    op.create_table(
        "giftcard_events",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("giftcard_request_id", sa.String(26), nullable=False),
        sa.Column("event_type", sa.String(30), nullable=False),
        sa.Column("admin_user", sa.String(120), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["giftcard_request_id"], ["giftcard_requests.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_giftcard_events_id", "giftcard_events", ["id"])
    op.create_index(
        "ix_giftcard_events_giftcard_request_id", "giftcard_events", ["giftcard_request_id"]
    )

    print("Creating booking tables...")

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_code", sa.String(40), nullable=False),
        sa.Column("product_id", sa.String(26), nullable=True),
        sa.Column("product_type", sa.String(40), nullable=True),
        sa.Column("product", JSONB(), nullable=True),
        sa.Column("technique", sa.String(30), nullable=True),
        sa.Column("slots", JSONB(), nullable=False, server_default="[]"),
        sa.Column("user_info", JSONB(), nullable=False, server_default="{}"),
        sa.Column("customer_email", sa.String(255), nullable=True),
        sa.Column("participants", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("booking_mode", sa.String(20), nullable=False, server_default="flexible"),
        sa.Column("booking_date", sa.Date(), nullable=True),
        sa.Column("client_note", sa.Text(), nullable=True),
        sa.Column("attendance", JSONB(), nullable=False, server_default="{}"),
        sa.Column("accepted_no_refund", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("payment_details", JSONB(), nullable=False, server_default="[]"),
        sa.Column("giftcard_id", sa.String(26), nullable=True),
        sa.Column("giftcard_redeemed_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["giftcard_id"], ["giftcards.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("participants > 0", name="check_participants_positive"),
        sa.CheckConstraint("price >= 0", name="check_booking_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('active', 'paid', 'expired')", name="check_booking_status"
        ),
        comment="Customer reservations with slot, product and payment documents",
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_booking_code", "bookings", ["booking_code"], unique=True)
    op.create_index("ix_bookings_customer_email", "bookings", ["customer_email"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_expires_at", "bookings", ["expires_at"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("type", sa.String(40), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("data", JSONB(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"])
    op.create_index("ix_notifications_type", "notifications", ["type"])
    op.create_index("ix_notifications_booking_id", "notifications", ["booking_id"])

    print("Creating timecard and delivery tables...")

    op.create_table(
        "employees",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("position", sa.String(120), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="check_employee_status"),
    )
    op.create_index("ix_employees_id", "employees", ["id"])
    op.create_index("ix_employees_code", "employees", ["code"], unique=True)

    op.create_table(
        "timecards",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("employee_id", sa.String(26), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("time_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column("hours_worked", sa.Numeric(6, 2), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "date", name="uq_timecard_employee_date"),
    )
    op.create_index("ix_timecards_id", "timecards", ["id"])
    op.create_index("ix_timecards_employee_id", "timecards", ["employee_id"])
    op.create_index("ix_timecards_date", "timecards", ["date"])

    op.create_table(
        "deliveries",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("ready_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("photos", JSONB(), nullable=False, server_default="[]"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_deliveries_id", "deliveries", ["id"])
    op.create_index("ix_deliveries_customer_email", "deliveries", ["customer_email"])
    op.create_index("ix_deliveries_scheduled_date", "deliveries", ["scheduled_date"])
    op.create_index("ix_deliveries_status", "deliveries", ["status"])

    print("Creating inquiry and invoice tables...")

    op.create_table(
        "inquiries",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("country_code", sa.String(8), nullable=True),
        sa.Column("participants", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("tentative_date", sa.Date(), nullable=True),
        sa.Column("tentative_time", sa.String(5), nullable=True),
        sa.Column("event_type", sa.String(120), nullable=True),
        sa.Column("inquiry_type", sa.String(20), nullable=False, server_default="group"),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="New"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('New', 'Contacted', 'Proposal Sent', 'Confirmed', 'Archived')",
            name="check_inquiry_status",
        ),
        sa.CheckConstraint(
            "inquiry_type IN ('group', 'couple', 'team_building')",
            name="check_inquiry_type",
        ),
    )
    op.create_index("ix_inquiries_id", "inquiries", ["id"])
    op.create_index("ix_inquiries_email", "inquiries", ["email"])
    op.create_index("ix_inquiries_status", "inquiries", ["status"])

    op.create_table(
        "invoice_requests",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("company_name", sa.String(200), nullable=False),
        sa.Column("tax_id", sa.String(40), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "requested_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('Pending', 'Processed')", name="check_invoice_status"),
    )
    op.create_index("ix_invoice_requests_id", "invoice_requests", ["id"])
    op.create_index("ix_invoice_requests_booking_id", "invoice_requests", ["booking_id"])
    op.create_index("ix_invoice_requests_status", "invoice_requests", ["status"])

    print("Studio schema created")


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    print("Dropping studio schema...")

    for table in (
        "inquiries",
        "invoice_requests",
        "deliveries",
        "timecards",
        "employees",
        "notifications",
        "bookings",
        "giftcard_events",
        "giftcard_audit",
        "giftcard_holds",
        "giftcards",
        "giftcard_requests",
        "studio_settings",
        "instructors",
        "products",
    ):
        op.drop_table(table)
