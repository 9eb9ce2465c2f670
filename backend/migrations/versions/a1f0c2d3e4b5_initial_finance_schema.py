"""initial finance schema: users, accounts, ledger, projects, payments, expenses

Revision ID: a1f0c2d3e4b5
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = "a1f0c2d3e4b5"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")

role_enum = sa.Enum("ADMIN", "OWNER", "SALES", "DEVELOPER", name="roleenum")
account_type_enum = sa.Enum("BANK", "WALLET", name="accounttype")
txn_type_enum = sa.Enum("CREDIT", "DEBIT", name="txntype")
txn_ref_enum = sa.Enum(
    "PAYMENT", "EXPENSE", "MANUAL", "TRANSFER", "REVERSAL", name="txnreftype"
)
project_status_enum = sa.Enum(
    "PENDING", "WORKING", "COMPLETED", "EXTENDED", "PAUSED", name="projectstatus"
)
price_type_enum = sa.Enum("FIXED", "HOURLY", name="pricetype")
wallet_status_enum = sa.Enum("PENDING", "ON_HOLD", "RELEASED", name="walletstatus")
bank_status_enum = sa.Enum("PENDING", "RELEASED", name="bankstatus")
expense_type_enum = sa.Enum("GENERAL", "PERSONAL", name="expensetype")
history_action_enum = sa.Enum("CREATE", "UPDATE", "DELETE", name="historyaction")
notification_type_enum = sa.Enum(
    "EXPENSE_REMINDER", "PAYMENT_RECEIVED", name="notificationtype"
)

MONEY = sa.Numeric(precision=20, scale=4)


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 2. Accounts + ledger
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("account_type", account_type_enum, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("details", JSONType, nullable=True),
        sa.Column("balance", MONEY, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_accounts_user", "accounts", ["user_id"])
    op.create_index("ix_accounts_type", "accounts", ["account_type"])

    op.create_table(
        "account_txns",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("account_id", sa.Uuid(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("txn_type", txn_type_enum, nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("delta", MONEY, nullable=False),
        sa.Column("balance_after", MONEY, nullable=False),
        sa.Column("ref_type", txn_ref_enum, nullable=False),
        sa.Column("ref_id", sa.Uuid(), nullable=True),
        sa.Column("remark", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("account_id", "sequence", name="uq_account_txn_sequence"),
        sa.CheckConstraint("amount > 0", name="ck_account_txn_amount_positive"),
    )
    op.create_index("ix_account_txns_account", "account_txns", ["account_id"])
    op.create_index("ix_account_txns_ref", "account_txns", ["ref_type", "ref_id"])

    # 3. Platforms, projects, payments, hourly work
    op.create_table(
        "platforms",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
        sa.Column("charge_percentage", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "charge_percentage >= 0 AND charge_percentage <= 100",
            name="ck_platform_charge_range",
        ),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("platform_id", sa.Uuid(), sa.ForeignKey("platforms.id"), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", project_status_enum, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("price_type", price_type_enum, nullable=False),
        sa.Column("hourly_rate", MONEY, nullable=True),
        sa.Column("fixed_price", MONEY, nullable=True),
        sa.Column("budget", MONEY, nullable=False),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_projects_created_by", "projects", ["created_by"])
    op.create_index("ix_projects_platform", "projects", ["platform_id"])

    op.create_table(
        "project_payments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("project_id", sa.Uuid(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("amount_in_inr", MONEY, nullable=False),
        sa.Column("platform_wallet_id", sa.Uuid(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("wallet_status", wallet_status_enum, nullable=False),
        sa.Column("wallet_received_date", sa.Date(), nullable=True),
        sa.Column("bank_account_id", sa.Uuid(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("bank_status", bank_status_enum, nullable=False),
        sa.Column("bank_transfer_date", sa.Date(), nullable=True),
        sa.Column("hours_billed", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_payment_amount_positive"),
        sa.CheckConstraint("amount_in_inr > 0", name="ck_payment_inr_positive"),
    )
    op.create_index("ix_payments_project", "project_payments", ["project_id"])
    op.create_index("ix_payments_wallet", "project_payments", ["platform_wallet_id"])
    op.create_index("ix_payments_bank", "project_payments", ["bank_account_id"])

    op.create_table(
        "hourly_work",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("hours", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("billed", sa.Boolean(), nullable=False),
        sa.Column("payment_id", sa.Uuid(), sa.ForeignKey("project_payments.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("hours > 0", name="ck_hourly_work_hours_positive"),
    )
    op.create_index("ix_hourly_work_project", "hourly_work", ["project_id"])
    op.create_index("ix_hourly_work_payment", "hourly_work", ["payment_id"])

    # 4. Expenses
    op.create_table(
        "expense_categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("expense_type", expense_type_enum, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column(
            "category_id", sa.Uuid(), sa.ForeignKey("expense_categories.id"), nullable=True
        ),
        sa.Column(
            "withdraw_account_id", sa.Uuid(), sa.ForeignKey("accounts.id"), nullable=False
        ),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("to_user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reminder", sa.String(500), nullable=True),
        sa.Column("reminder_date", sa.Date(), nullable=True),
        sa.Column("reminded", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
    )
    op.create_index("ix_expenses_date", "expenses", ["expense_date"])
    op.create_index("ix_expenses_created_by", "expenses", ["created_by"])
    op.create_index("ix_expenses_reminder", "expenses", ["reminder_date", "reminded"])

    # 5. History + notifications
    op.create_table(
        "history",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("action", history_action_enum, nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("changes", JSONType, nullable=True),
        sa.Column("metadata", JSONType, nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_history_user_ts", "history", ["user_id", "timestamp"])
    op.create_index("ix_history_entity_ts", "history", ["entity_type", "timestamp"])
    op.create_index("ix_history_action_ts", "history", ["action", "timestamp"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("notification_type", notification_type_enum, nullable=False),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("data", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "read"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("history")
    op.drop_table("expenses")
    op.drop_table("expense_categories")
    op.drop_table("hourly_work")
    op.drop_table("project_payments")
    op.drop_table("projects")
    op.drop_table("platforms")
    op.drop_table("account_txns")
    op.drop_table("accounts")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        notification_type_enum,
        history_action_enum,
        expense_type_enum,
        bank_status_enum,
        wallet_status_enum,
        price_type_enum,
        project_status_enum,
        txn_ref_enum,
        txn_type_enum,
        account_type_enum,
        role_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
