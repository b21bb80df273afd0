"""Initial schema for the shareholder registry."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None

_ENUMS = ("dividend_status", "stage_status", "shareholder_status", "business_role")


def _drop_enum(name: str) -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute(sa.text(f"DROP TYPE IF EXISTS {name}"))


def upgrade() -> None:  # noqa: D401
    """Create registry tables, indexes and the single-RUNNING-stage constraint."""

    business_role = sa.Enum("DRIVER", "TRAVEL_AGENT", "SHOPS_HOTELS", "ADMIN", name="business_role")
    shareholder_status = sa.Enum("PENDING", "APPROVED", "REJECTED", name="shareholder_status")
    stage_status = sa.Enum("UPCOMING", "RUNNING", "SOLD_OUT", name="stage_status")
    dividend_status = sa.Enum("PAID", name="dividend_status")

    for enum_type in (business_role, shareholder_status, stage_status, dividend_status):
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "shareholders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("father_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("pin_code", sa.String(length=16), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("business_role", business_role, nullable=False, server_default="DRIVER"),
        sa.Column("num_shares", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("photo_data", sa.Text()),
        sa.Column("signature_data", sa.Text()),
        sa.Column("price_per_share", sa.Numeric(18, 2), nullable=False),
        sa.Column("total_investment", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("stage", sa.Integer(), nullable=False),
        sa.Column("status", shareholder_status, nullable=False, server_default="PENDING"),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("email", name="uq_shareholders_email"),
        sa.UniqueConstraint("username", name="uq_shareholders_username"),
    )
    op.create_index("ix_shareholders_status", "shareholders", ["status"])

    op.create_table(
        "investment_stages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("stage", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("price_per_share", sa.Numeric(18, 2), nullable=False),
        sa.Column("min_subscribers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_subscribers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", stage_status, nullable=False, server_default="UPCOMING"),
        sa.Column("shares_available", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("stage", name="uq_investment_stages_stage"),
    )
    op.create_index(
        "uq_investment_stages_running",
        "investment_stages",
        ["status"],
        unique=True,
        sqlite_where=sa.text("status = 'RUNNING'"),
        postgresql_where=sa.text("status = 'RUNNING'"),
    )

    op.create_table(
        "dividend_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "shareholder_id",
            sa.Integer(),
            sa.ForeignKey("shareholders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("month", sa.String(length=64), nullable=False),
        sa.Column("gross_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("gst_rate", sa.Numeric(7, 4), nullable=False, server_default="0"),
        sa.Column("gst_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("net_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("payment_method", sa.String(length=64), nullable=False, server_default="BANK_TRANSFER"),
        sa.Column("status", dividend_status, nullable=False, server_default="PAID"),
        sa.Column("paid_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_dividend_records_shareholder_id", "dividend_records", ["shareholder_id"])

    op.create_table(
        "role_prices",
        sa.Column("business_role", sa.String(length=32), primary_key=True),
        sa.Column("price", sa.Numeric(18, 2), nullable=False, server_default="350"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "subscriber_counts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("business_role", sa.String(length=32), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("business_role", name="uq_subscriber_counts_business_role"),
    )


def downgrade() -> None:  # noqa: D401
    """Drop registry tables."""

    op.drop_table("subscriber_counts")
    op.drop_table("role_prices")

    op.drop_index("ix_dividend_records_shareholder_id", table_name="dividend_records")
    op.drop_table("dividend_records")

    op.drop_index("uq_investment_stages_running", table_name="investment_stages")
    op.drop_table("investment_stages")

    op.drop_index("ix_shareholders_status", table_name="shareholders")
    op.drop_table("shareholders")

    for enum_name in _ENUMS:
        _drop_enum(enum_name)
