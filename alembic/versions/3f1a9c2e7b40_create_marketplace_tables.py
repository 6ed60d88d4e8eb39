"""create users, catalog, hosted subscriptions, memberships, join requests and payment records

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1a9c2e7b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("profile_picture_url", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(length=30), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "subscription_services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_subscription_services_id"), "subscription_services", ["id"], unique=False)

    op.create_table(
        "hosted_subscriptions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("host_user_id", sa.Integer(), nullable=False),
        sa.Column("subscription_service_id", sa.Integer(), nullable=False),
        sa.Column("subscription_title", sa.String(length=255), nullable=False),
        sa.Column("plan_details", sa.Text(), nullable=True),
        sa.Column("total_slots", sa.Integer(), nullable=False),
        sa.Column("cost_per_cycle", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("billing_cycle", sa.String(length=20), nullable=False),
        sa.Column("payment_qr_code_url", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["host_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["subscription_service_id"], ["subscription_services.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_hosted_subscriptions_id"), "hosted_subscriptions", ["id"], unique=False)
    op.create_index(
        "ix_hosted_subscriptions_host_created", "hosted_subscriptions", ["host_user_id", "created_at"], unique=False
    )
    op.create_index(
        "ix_hosted_subscriptions_service", "hosted_subscriptions", ["subscription_service_id"], unique=False
    )

    op.create_table(
        "subscription_memberships",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("member_user_id", sa.Integer(), nullable=False),
        sa.Column("hosted_subscription_id", sa.Integer(), nullable=False),
        sa.Column("joined_date", sa.DateTime(), nullable=False),
        sa.Column("payment_status", sa.String(length=50), nullable=False),
        sa.Column("next_payment_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["member_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["hosted_subscription_id"], ["hosted_subscriptions.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_user_id", "hosted_subscription_id", name="uq_member_subscription"),
    )
    op.create_index(op.f("ix_subscription_memberships_id"), "subscription_memberships", ["id"], unique=False)
    op.create_index(
        op.f("ix_subscription_memberships_member_user_id"), "subscription_memberships", ["member_user_id"], unique=False
    )
    op.create_index(
        op.f("ix_subscription_memberships_hosted_subscription_id"),
        "subscription_memberships",
        ["hosted_subscription_id"],
        unique=False,
    )

    op.create_table(
        "join_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("requester_user_id", sa.Integer(), nullable=False),
        sa.Column("hosted_subscription_id", sa.Integer(), nullable=False),
        sa.Column("request_date", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["requester_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["hosted_subscription_id"], ["hosted_subscriptions.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_join_requests_id"), "join_requests", ["id"], unique=False)
    op.create_index(op.f("ix_join_requests_requester_user_id"), "join_requests", ["requester_user_id"], unique=False)
    op.create_index(
        "ix_join_requests_subscription_status", "join_requests", ["hosted_subscription_id", "status"], unique=False
    )
    op.create_index(
        "uq_join_requests_pending_requester_subscription",
        "join_requests",
        ["requester_user_id", "hosted_subscription_id"],
        unique=True,
        postgresql_where=sa.text("status = 'Pending'"),
    )

    op.create_table(
        "payment_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subscription_membership_id", sa.Integer(), nullable=False),
        sa.Column("payment_cycle_identifier", sa.String(length=100), nullable=False),
        sa.Column("amount_expected", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("amount_paid", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("payment_method", sa.String(length=100), nullable=True),
        sa.Column("transaction_reference", sa.String(length=255), nullable=True),
        sa.Column("proof_image_url", sa.Text(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("reviewed_by_user_id", sa.Integer(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["subscription_membership_id"], ["subscription_memberships.id"]),
        sa.ForeignKeyConstraint(["reviewed_by_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payment_records_id"), "payment_records", ["id"], unique=False)
    op.create_index(
        op.f("ix_payment_records_subscription_membership_id"),
        "payment_records",
        ["subscription_membership_id"],
        unique=False,
    )
    op.create_index(
        "ix_payment_records_membership_status",
        "payment_records",
        ["subscription_membership_id", "status"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_payment_records_membership_status", table_name="payment_records")
    op.drop_index(op.f("ix_payment_records_subscription_membership_id"), table_name="payment_records")
    op.drop_index(op.f("ix_payment_records_id"), table_name="payment_records")
    op.drop_table("payment_records")

    op.drop_index("uq_join_requests_pending_requester_subscription", table_name="join_requests")
    op.drop_index("ix_join_requests_subscription_status", table_name="join_requests")
    op.drop_index(op.f("ix_join_requests_requester_user_id"), table_name="join_requests")
    op.drop_index(op.f("ix_join_requests_id"), table_name="join_requests")
    op.drop_table("join_requests")

    op.drop_index(op.f("ix_subscription_memberships_hosted_subscription_id"), table_name="subscription_memberships")
    op.drop_index(op.f("ix_subscription_memberships_member_user_id"), table_name="subscription_memberships")
    op.drop_index(op.f("ix_subscription_memberships_id"), table_name="subscription_memberships")
    op.drop_table("subscription_memberships")

    op.drop_index("ix_hosted_subscriptions_service", table_name="hosted_subscriptions")
    op.drop_index("ix_hosted_subscriptions_host_created", table_name="hosted_subscriptions")
    op.drop_index(op.f("ix_hosted_subscriptions_id"), table_name="hosted_subscriptions")
    op.drop_table("hosted_subscriptions")

    op.drop_index(op.f("ix_subscription_services_id"), table_name="subscription_services")
    op.drop_table("subscription_services")

    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
