"""
API route modules.
"""

from api.routes.customers import router as customers_router
from api.routes.health import router as health_router
from api.routes.orders import router as orders_router
from api.routes.products import router as products_router
from api.routes.statistics import router as statistics_router

__all__ = [
    "customers_router",
    "health_router",
    "orders_router",
    "products_router",
    "statistics_router",
]
