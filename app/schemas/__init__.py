from .auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    UserResponse,
    PasswordResetRequest,
    PasswordResetConfirm
)
from .client import ClientCreate, ClientUpdate, ClientResponse
from .product import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryReorderRequest,
    ProductCreate,
    ProductUpdate,
    ProductResponse
)
from .order import (
    OrderItemInput,
    OrderCreate,
    OrderUpdate,
    PaymentInfo,
    StatusUpdate,
    DepositUpdate,
    FullPaymentRequest,
    OrderItemResponse,
    OrderResponse,
    WhatsAppTemplateResponse,
    WhatsAppResponse
)
from .transaction import TransactionCreate, TransactionUpdate, TransactionResponse
from .profile import ProfileUpdate, ProfileResponse
from .finance import (
    FinanceTotals,
    GrossProfit,
    CategoryExpense,
    FinanceSummaryResponse,
    MonthComparisonResponse,
    TopProduct
)
from .notification import NotificationItem, NotificationsResponse
from .documents import QuoteRequest, QuoteResponse, FinanceReportRequest, FinanceReportResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
    "PasswordResetRequest",
    "PasswordResetConfirm",
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryReorderRequest",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "OrderItemInput",
    "OrderCreate",
    "OrderUpdate",
    "PaymentInfo",
    "StatusUpdate",
    "DepositUpdate",
    "FullPaymentRequest",
    "OrderItemResponse",
    "OrderResponse",
    "WhatsAppTemplateResponse",
    "WhatsAppResponse",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "ProfileUpdate",
    "ProfileResponse",
    "FinanceTotals",
    "GrossProfit",
    "CategoryExpense",
    "FinanceSummaryResponse",
    "MonthComparisonResponse",
    "TopProduct",
    "NotificationItem",
    "NotificationsResponse",
    "QuoteRequest",
    "QuoteResponse",
    "FinanceReportRequest",
    "FinanceReportResponse"
]
