from .user import User
from .profile import Profile
from .client import Client
from .product import Product, ProductCategory, UnitType
from .order import Order, OrderItem, OrderStatus, PaymentMethod, format_order_number
from .transaction import (
    Transaction,
    TransactionType,
    TransactionCategory,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES
)
from .subscription import Subscription, SubscriptionStatus, PlanType

__all__ = [
    "User",
    "Profile",
    "Client",
    "Product",
    "ProductCategory",
    "UnitType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "format_order_number",
    "Transaction",
    "TransactionType",
    "TransactionCategory",
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "Subscription",
    "SubscriptionStatus",
    "PlanType"
]
