from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from store_common.security import Permissions
from .. import crud, schemas, models
from ..database import get_db
from ..errors import NotFound, ValidationFailed
from ..security import ActiveUser

router = APIRouter(prefix="/products", tags=["Products"])


async def _categories_or_fail(db: AsyncSession, category_ids: List[int]):
    """Todas las categorías pedidas deben existir."""
    categories = await crud.get_categories_by_ids(db, category_ids)
    if len(categories) != len(set(category_ids)):
        raise ValidationFailed.single("exists", "category_ids")
    return categories

async def _product_or_404(db: AsyncSession, product_id: int, with_categories: bool = False):
    product = await crud.get_product(db, product_id, with_categories=with_categories)
    if product is None:
        raise NotFound("Product not found")
    return product

# --- PÚBLICOS ---

@router.get("", response_model=schemas.DataResponse[schemas.ProductResponse])
async def read_products(db: AsyncSession = Depends(get_db)):
    """Catálogo completo de productos."""
    return {"data": await crud.get_products(db)}

@router.get("/{product_id}", response_model=schemas.ItemResponse[schemas.ProductResponse])
async def read_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Obtiene el detalle de un producto por ID."""
    return {"data": await _product_or_404(db, product_id)}

@router.get("/{product_id}/categories", response_model=schemas.DataResponse[schemas.CategoryResponse])
async def read_product_categories(product_id: int, db: AsyncSession = Depends(get_db)):
    """Categorías asociadas a un producto."""
    product = await _product_or_404(db, product_id, with_categories=True)
    return {"data": product.categories}

# --- ADMINISTRACIÓN ---

@router.post("", response_model=schemas.DataResponse[schemas.ProductResponse], status_code=201)
async def create_product(
    product: schemas.ProductCreate,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.PRODUCT_MANAGE))
):
    """
    **Crear Producto**

    **Errores:**
    - `400 Bad Request`: campos faltantes o categorías inexistentes.
    """
    categories = await _categories_or_fail(db, product.category_ids)
    created = await crud.create_product(db, product.model_dump(exclude={"category_ids"}), categories)
    return {"data": [created]}

@router.put("/{product_id}", response_model=schemas.DataResponse[schemas.ProductResponse])
async def update_product(
    product_id: int,
    product_update: schemas.ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.PRODUCT_MANAGE))
):
    """Edita un producto existente; `category_ids` reemplaza sus categorías."""
    product = await _product_or_404(db, product_id, with_categories=True)

    categories = None
    if product_update.category_ids is not None:
        categories = await _categories_or_fail(db, product_update.category_ids)

    updated = await crud.update_product(
        db, product, product_update.model_dump(exclude={"category_ids"}), categories
    )
    return {"data": [updated]}

@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.PRODUCT_MANAGE))
):
    product = await _product_or_404(db, product_id)
    await crud.delete_product(db, product)
    return # 204 no devuelve cuerpo
