"""
Product endpoints.

Provides CRUD operations for products:
- POST /api/produtos - Create product (multipart, optional image)
- GET /api/produtos - List products
- GET /api/produtos/{product_id} - Get one product
- PUT /api/produtos/{product_id} - Overwrite name, description, price, stock
- DELETE /api/produtos/{product_id} - Remove product
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.dependencies import get_product_service
from api.schemas import CreatedResponse, ProductUpdateRequest, SuccessResponse
from core.logging import get_logger
from services import ImageUpload, ProductService


logger = get_logger(__name__)
router = APIRouter(prefix="/api/produtos", tags=["Products"])


@router.post("", response_model=CreatedResponse)
async def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    stock: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: ProductService = Depends(get_product_service),
) -> CreatedResponse:
    """
    Create a product from a multipart form.

    ``price`` must parse as a number and ``stock`` as an integer, otherwise
    the request is rejected with 400. The optional ``image`` file is stored
    and exposed under ``/uploads/``.
    """
    logger.info(
        "Creating product",
        name=name,
        has_image=image is not None and bool(image.filename),
    )

    upload = None
    if image is not None and image.filename:
        upload = ImageUpload(filename=image.filename, file=image.file)

    product_id = await service.create(
        name=name,
        description=description,
        price=price,
        stock=stock,
        image=upload,
    )
    return CreatedResponse(id=product_id)


@router.get("")
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> list[dict[str, Any]]:
    return await service.list_all()


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any]:
    return await service.get(product_id)


@router.put("/{product_id}", response_model=SuccessResponse)
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    service: ProductService = Depends(get_product_service),
) -> SuccessResponse:
    """
    Overwrite a product's name, description, price and stock.

    The image and creation date are left unchanged.
    """
    await service.update(
        product_id,
        name=request.name,
        description=request.description,
        price=request.price,
        stock=request.stock,
    )
    return SuccessResponse()


@router.delete("/{product_id}", response_model=SuccessResponse)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> SuccessResponse:
    """Remove a product. Unknown ids succeed as well."""
    await service.delete(product_id)
    return SuccessResponse()
