"""
Store statistics.

Computed on demand from full reads of the three collections. The reads are
independent, so the figures may reflect slightly different instants.
"""

import asyncio
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from core.logging import get_logger
from core.storage import BaseRecordStore
from services.customers import CustomerService
from services.orders import PENDING_STATUS, OrderService
from services.products import ProductService


logger = get_logger(__name__)

_CENTS = Decimal("0.01")

# Totals beyond the range of a JSON double are not amounts
_MAX_EXPONENT = 308

# Enough digits to add totals up to 1e308 without rounding the cents
_SUM_PRECISION = 400


@dataclass
class Statistics:
    """Aggregate figures over all stored records."""
    total_orders: int
    total_sales: Decimal
    total_products: int
    total_customers: int
    pending_orders: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API representation."""
        return {
            "totalOrders": self.total_orders,
            "totalSales": format_amount(self.total_sales),
            "totalProducts": self.total_products,
            "totalCustomers": self.total_customers,
            "pendingOrders": self.pending_orders,
        }


def format_amount(amount: Decimal) -> str:
    """Fixed two-decimal rendering, rounding half up, at any magnitude."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return f"{amount.quantize(_CENTS, rounding=ROUND_HALF_UP):f}"


def order_total(value: Any) -> Decimal:
    """
    Contribution of one order's ``total`` to the sales sum.

    Missing and null totals count as zero. Numeric strings are parsed;
    anything else that is not a finite number within double range
    also counts as zero.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        logger.warning("Ignoring non-numeric order total", total=repr(value))
        return Decimal(0)

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        logger.warning("Ignoring non-numeric order total", total=repr(value))
        return Decimal(0)

    if not amount.is_finite():
        logger.warning("Ignoring non-finite order total", total=repr(value))
        return Decimal(0)
    if amount.adjusted() > _MAX_EXPONENT:
        logger.warning("Ignoring out-of-range order total", total=repr(value))
        return Decimal(0)
    return amount


class StatisticsService:
    """Reads every order, product and customer and aggregates them."""

    def __init__(self, store: BaseRecordStore):
        self._orders = store.collection(OrderService.COLLECTION_NAME)
        self._products = store.collection(ProductService.COLLECTION_NAME)
        self._customers = store.collection(CustomerService.COLLECTION_NAME)

    async def compute(self) -> Statistics:
        """
        Compute the statistics.

        Any read failure propagates; partial figures are never returned.
        """
        orders, products, customers = await asyncio.gather(
            self._orders.get_all(),
            self._products.get_all(),
            self._customers.get_all(),
        )

        total_sales = Decimal(0)
        pending = 0
        with localcontext() as ctx:
            ctx.prec = _SUM_PRECISION
            for order in orders:
                total_sales += order_total(order.data.get("total"))
                if order.data.get("status") == PENDING_STATUS:
                    pending += 1

        stats = Statistics(
            total_orders=len(orders),
            total_sales=total_sales,
            total_products=len(products),
            total_customers=len(customers),
            pending_orders=pending,
        )
        logger.debug("Statistics computed", **stats.to_dict())
        return stats
