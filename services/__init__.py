"""
Entity services and reporting.

Each service is constructed with the record store it works on.
"""

from services.customers import CustomerService
from services.orders import OrderService
from services.products import ImageUpload, ProductService
from services.statistics import Statistics, StatisticsService

__all__ = [
    "CustomerService",
    "ImageUpload",
    "OrderService",
    "ProductService",
    "Statistics",
    "StatisticsService",
]
