from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from store_common.security import Permissions
from .. import crud, schemas, models
from ..database import get_db
from ..errors import NotFound
from ..security import ActiveUser
from ..validation import validate

router = APIRouter(prefix="/categories", tags=["Categories"])


async def _category_or_404(db: AsyncSession, category_id: int):
    category = await crud.get_category(db, category_id)
    if category is None:
        raise NotFound("Category not found")
    return category

@router.get("", response_model=schemas.DataResponse[schemas.CategoryResponse])
async def read_categories(db: AsyncSession = Depends(get_db)):
    return {"data": await crud.get_categories(db)}

@router.get("/{category_id}", response_model=schemas.ItemResponse[schemas.CategoryResponse])
async def read_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return {"data": await _category_or_404(db, category_id)}

@router.post("", response_model=schemas.DataResponse[schemas.CategoryResponse], status_code=201)
async def create_category(
    category: schemas.CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CATEGORY_MANAGE))
):
    """Crea una categoría (`name` y `description` obligatorios)."""
    created = await crud.create_category(db, category.model_dump())
    return {"data": [created]}

@router.put("/{category_id}", response_model=schemas.DataResponse[schemas.CategoryResponse])
async def update_category(
    category_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CATEGORY_MANAGE))
):
    """Edita una categoría. Responde 404 antes de validar el cuerpo."""
    category = await _category_or_404(db, category_id)
    data = validate(schemas.CategoryCreate, payload)
    updated = await crud.update_category(db, category, data.model_dump())
    return {"data": [updated]}

@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CATEGORY_MANAGE))
):
    category = await _category_or_404(db, category_id)
    await crud.delete_category(db, category)
    return
