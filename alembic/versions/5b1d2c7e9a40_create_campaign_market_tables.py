"""create_campaign_market_tables

Revision ID: 5b1d2c7e9a40
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1d2c7e9a40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

big_id = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "advertiser_profiles",
        sa.Column("id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("company_name", sa.String(length=100), nullable=False),
        sa.Column("business_number", sa.String(length=12), nullable=False, unique=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "influencer_profiles",
        sa.Column("id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("sns_channel_name", sa.String(length=100), nullable=False),
        sa.Column("sns_channel_url", sa.String(length=255), nullable=True),
        sa.Column("follower_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("birth_date", sa.Date(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "campaigns",
        sa.Column("id", big_id, primary_key=True, autoincrement=True),
        sa.Column(
            "advertiser_id",
            sa.String(length=36),
            sa.ForeignKey("advertiser_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("mission", sa.Text(), nullable=False),
        sa.Column("benefits", sa.Text(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("recruitment_count", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="RECRUITING"),
        sa.Column("early_termination_date", sa.Date(), nullable=True),
        sa.Column("early_termination_reason", sa.String(length=500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_campaign_advertiser_created", "campaigns", ["advertiser_id", "created_at"])
    op.create_table(
        "applications",
        sa.Column("id", big_id, primary_key=True, autoincrement=True),
        sa.Column("campaign_id", big_id, sa.ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "influencer_id",
            sa.String(length=36),
            sa.ForeignKey("influencer_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("motivation", sa.Text(), nullable=False),
        sa.Column("visit_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="SUBMITTED"),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("campaign_id", "influencer_id", name="uq_application_campaign_influencer"),
    )
    op.create_index("ix_application_campaign_status", "applications", ["campaign_id", "status"])
    op.create_table(
        "campaign_status_logs",
        sa.Column("id", big_id, primary_key=True, autoincrement=True),
        sa.Column("campaign_id", big_id, sa.ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("logged_by", sa.String(length=36), nullable=True),
        sa.Column("logged_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "audit_logs",
        sa.Column("id", big_id, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("target_type", sa.String(length=50), nullable=True),
        sa.Column("target_id", sa.String(length=50), nullable=True),
        sa.Column("ip_address", sa.String(length=50), nullable=True),
        sa.Column("user_agent", sa.String(length=255), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("campaign_status_logs")
    op.drop_index("ix_application_campaign_status", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_campaign_advertiser_created", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_table("influencer_profiles")
    op.drop_table("advertiser_profiles")
    op.drop_table("users")
