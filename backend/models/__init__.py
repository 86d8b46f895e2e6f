from backend.models.user import AuthorizedUser
from backend.models.order import Order, OrderItem, OrderStatus, OrderChannel, PaymentMode
from backend.models.expense import Expense, ExpenseCategory
from backend.models.daily_summary import DailySummary
from backend.models.business_settings import BusinessSettings

__all__ = [
    "AuthorizedUser",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderChannel",
    "PaymentMode",
    "Expense",
    "ExpenseCategory",
    "DailySummary",
    "BusinessSettings",
]
