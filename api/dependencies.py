"""
FastAPI dependencies for dependency injection.

The record store and upload storage are created by the application
lifespan and kept on ``app.state``; services are built per request
around them.
"""

from fastapi import Depends, Request

from core.storage import BaseRecordStore
from core.uploads import LocalUploadStorage
from services import (
    CustomerService,
    OrderService,
    ProductService,
    StatisticsService,
)


async def get_record_store(request: Request) -> BaseRecordStore:
    """
    Dependency that provides the record store.

    Usage:
        @router.get("/ready")
        async def ready(store: BaseRecordStore = Depends(get_record_store)):
            ...
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Record store not initialized")
    return store


async def get_upload_storage(request: Request) -> LocalUploadStorage:
    """Dependency that provides the upload storage."""
    uploads = getattr(request.app.state, "uploads", None)
    if uploads is None:
        raise RuntimeError("Upload storage not initialized")
    return uploads


async def get_customer_service(
    store: BaseRecordStore = Depends(get_record_store),
) -> CustomerService:
    return CustomerService(store)


async def get_product_service(
    store: BaseRecordStore = Depends(get_record_store),
    uploads: LocalUploadStorage = Depends(get_upload_storage),
) -> ProductService:
    return ProductService(store, uploads)


async def get_order_service(
    store: BaseRecordStore = Depends(get_record_store),
) -> OrderService:
    return OrderService(store)


async def get_statistics_service(
    store: BaseRecordStore = Depends(get_record_store),
) -> StatisticsService:
    return StatisticsService(store)
