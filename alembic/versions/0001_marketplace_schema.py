"""marketplace schema

Revision ID: 0001_marketplace
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_marketplace"
down_revision = None
branch_labels = None
depends_on = None


def _entity_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        *_entity_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
    )
    op.create_table(
        "places",
        *_entity_columns(),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        sa.Column("city", sa.String(length=255), nullable=False),
        sa.Column("state", sa.String(length=64), nullable=False),
        sa.Column("latitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("longitude", sa.Numeric(10, 7), nullable=True),
    )
    op.create_table(
        "companies",
        *_entity_columns(),
        sa.Column("place_id", sa.Integer(), sa.ForeignKey("places.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("latitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("longitude", sa.Numeric(10, 7), nullable=True),
    )
    op.create_index("ix_companies_place_id", "companies", ["place_id"])

    op.create_table(
        "users",
        *_entity_columns(),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="PUBLIC_USER"),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("place_id", sa.Integer(), sa.ForeignKey("places.id"), nullable=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "company_delivery",
        *_entity_columns(),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("available_types", sa.JSON(), nullable=False),
        sa.Column("fee_calculation_type", sa.String(length=32), nullable=False, server_default="FIXED"),
        sa.Column("base_fee", sa.Numeric(8, 2), nullable=False, server_default="0"),
        sa.Column("fee_per_km", sa.Numeric(8, 2), nullable=True),
        sa.Column("free_delivery_min_value", sa.Numeric(8, 2), nullable=True),
        sa.Column("estimated_time_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("max_delivery_time_minutes", sa.Integer(), nullable=True),
        sa.Column("pickup_time_minutes", sa.Integer(), nullable=False, server_default="15"),
        sa.Column("minimum_order_value", sa.Numeric(8, 2), nullable=True),
        sa.Column("maximum_order_value", sa.Numeric(8, 2), nullable=True),
        sa.Column("accepts_cash", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("accepts_card", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("accepts_pix", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("delivery_instructions", sa.Text(), nullable=True),
        sa.Column("pickup_instructions", sa.Text(), nullable=True),
        sa.Column("delivery_phone", sa.String(length=32), nullable=True),
    )
    op.create_table(
        "delivery_zones",
        *_entity_columns(),
        sa.Column(
            "delivery_id",
            sa.Integer(),
            sa.ForeignKey("company_delivery.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("zone_type", sa.String(length=32), nullable=False),
        sa.Column("radius_km", sa.Numeric(6, 2), nullable=True),
        sa.Column("coordinates", sa.JSON(), nullable=True),
        sa.Column("neighborhoods", sa.Text(), nullable=True),
        sa.Column("postal_codes", sa.Text(), nullable=True),
        sa.Column("delivery_fee", sa.Numeric(8, 2), nullable=False, server_default="0"),
        sa.Column("estimated_time_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("minimum_order_value", sa.Numeric(8, 2), nullable=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint("company_id", "name", name="uq_delivery_zone_company_name"),
    )
    op.create_index("ix_delivery_zones_company_id", "delivery_zones", ["company_id"])

    op.create_table(
        "company_schedule",
        *_entity_columns(),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("timezone", sa.String(length=100), nullable=True),
        sa.Column("allow_online_scheduling", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("slot_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("advance_booking_days", sa.Integer(), nullable=True),
        sa.Column("schedule_notes", sa.Text(), nullable=True),
        sa.Column("holiday_message", sa.String(length=500), nullable=True),
        sa.Column("closed_message", sa.String(length=500), nullable=True),
        sa.Column("show_next_open_time", sa.Boolean(), nullable=False, server_default=sa.text("1")),
    )
    op.create_table(
        "company_schedule_hours",
        *_entity_columns(),
        sa.Column(
            "schedule_id",
            sa.Integer(),
            sa.ForeignKey("company_schedule.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.String(length=16), nullable=False),
        sa.Column("schedule_type", sa.String(length=32), nullable=False, server_default="REGULAR"),
        sa.Column("open_time", sa.String(length=5), nullable=True),
        sa.Column("close_time", sa.String(length=5), nullable=True),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_24_hours", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("break_start_time", sa.String(length=5), nullable=True),
        sa.Column("break_end_time", sa.String(length=5), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("specific_date", sa.Date(), nullable=True),
        sa.Column("valid_from", sa.Date(), nullable=True),
        sa.Column("valid_until", sa.Date(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_company_schedule_hours_company_id", "company_schedule_hours", ["company_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("actor_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("actor_identifier", sa.String(length=255), nullable=False),
        sa.Column("action_type", sa.String(length=64), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=True),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("before_snapshot", sa.JSON(), nullable=True),
        sa.Column("after_snapshot", sa.JSON(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_index("ix_company_schedule_hours_company_id", table_name="company_schedule_hours")
    op.drop_table("company_schedule_hours")
    op.drop_table("company_schedule")
    op.drop_index("ix_delivery_zones_company_id", table_name="delivery_zones")
    op.drop_table("delivery_zones")
    op.drop_table("company_delivery")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_companies_place_id", table_name="companies")
    op.drop_table("companies")
    op.drop_table("places")
    op.drop_table("organizations")
