# backend/app/models/finance.py: single import point for every model.
#
# Importing this module registers all mapped classes so string relationship
# targets resolve (workers, scripts, migrations, tests).

from backend.app.models.user import RoleEnum, User
from backend.app.models.account import Account, AccountTxn, AccountType, TxnRefType, TxnType
from backend.app.models.project import (
    BankStatus,
    HourlyWork,
    Platform,
    PriceType,
    Project,
    ProjectPayment,
    ProjectStatus,
    WalletStatus,
)
from backend.app.models.expense import Expense, ExpenseCategory, ExpenseType
from backend.app.models.history import History, HistoryAction
from backend.app.models.notification import Notification, NotificationType

__all__ = [
    "RoleEnum",
    "User",
    "Account",
    "AccountTxn",
    "AccountType",
    "TxnRefType",
    "TxnType",
    "BankStatus",
    "HourlyWork",
    "Platform",
    "PriceType",
    "Project",
    "ProjectPayment",
    "ProjectStatus",
    "WalletStatus",
    "Expense",
    "ExpenseCategory",
    "ExpenseType",
    "History",
    "HistoryAction",
    "Notification",
    "NotificationType",
]
