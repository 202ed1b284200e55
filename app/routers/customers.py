from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from store_common.security import Permissions
from .. import schemas, models
from ..database import get_db
from ..security import ActiveUser
from ..services.customers import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post("", response_model=schemas.DataResponse[schemas.CustomerAccountResponse], status_code=201)
async def create_customer(customer: schemas.CustomerCreate, db: AsyncSession = Depends(get_db)):
    """
    **Crear Cliente**

    Alta pública: crea el usuario con rol `customer` y su perfil.

    **Validaciones:**
    - `email` válido y no registrado.
    - `first_name` y `last_name` solo letras.
    """
    user = await CustomerService.register_customer(db, customer)
    return {"data": [user]}

@router.get("", response_model=schemas.DataResponse[schemas.CustomerAccountResponse])
async def read_customers(
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CUSTOMER_READ))
):
    """Lista los usuarios activos con rol cliente y su perfil."""
    return {"data": await CustomerService.list_customers(db)}

@router.get("/{user_id}", response_model=schemas.DataResponse[schemas.CustomerAccountResponse])
async def read_customer(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CUSTOMER_READ))
):
    return {"data": [await CustomerService.get_customer(db, user_id)]}

@router.put("/{user_id}", response_model=schemas.DataResponse[schemas.CustomerAccountResponse])
async def update_customer(
    user_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CUSTOMER_MANAGE))
):
    """Edita email y nombres. Responde 404 antes de validar el cuerpo."""
    updated = await CustomerService.update_customer(db, user_id, payload)
    return {"data": [updated]}

@router.delete("/{user_id}", status_code=204)
async def delete_customer(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(ActiveUser(Permissions.CUSTOMER_MANAGE))
):
    """
    **Archivar Cliente**

    Borrado lógico: marca `deleted_at` en el usuario. No se borra físicamente.
    """
    await CustomerService.delete_customer(db, user_id)
    return # 204 no devuelve cuerpo
