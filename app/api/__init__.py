from .auth import router as auth_router
from .profile import router as profile_router
from .clients import router as clients_router
from .categories import router as categories_router
from .products import router as products_router
from .orders import router as orders_router
from .transactions import router as transactions_router
from .finances import router as finances_router
from .notifications import router as notifications_router
from .documents import router as documents_router
from .payments import router as payments_router
from .stats import router as stats_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "profile_router",
    "clients_router",
    "categories_router",
    "products_router",
    "orders_router",
    "transactions_router",
    "finances_router",
    "notifications_router",
    "documents_router",
    "payments_router",
    "stats_router",
    "admin_router"
]
