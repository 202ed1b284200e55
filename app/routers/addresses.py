from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from store_common.security import Permissions
from .. import schemas, models
from ..config import ADDRESS_ATOMIC_WRITES
from ..crud import AddressStore
from ..database import get_db
from ..errors import Unauthorized
from ..security import ActiveUser, resolve_customer
from ..services.address_policy import DefaultAddressPolicy

router = APIRouter(prefix="/customers/{customer_id}/addresses", tags=["Addresses"])

require_address_access = ActiveUser(Permissions.ADDRESS_MANAGE)


def get_address_store(db: AsyncSession = Depends(get_db)) -> AddressStore:
    return AddressStore(db, atomic=ADDRESS_ATOMIC_WRITES)


@router.get("", response_model=schemas.DataResponse[schemas.AddressResponse])
async def read_addresses(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    store: AddressStore = Depends(get_address_store),
    user: models.User = Depends(require_address_access)
):
    """Lista las direcciones del cliente autenticado."""
    customer = await resolve_customer(db, user, customer_id)
    return {"data": await store.find_by_customer(customer.id)}

@router.get("/{address_id}", response_model=schemas.DataResponse[schemas.AddressResponse])
async def read_address(
    customer_id: int,
    address_id: int,
    db: AsyncSession = Depends(get_db),
    store: AddressStore = Depends(get_address_store),
    user: models.User = Depends(require_address_access)
):
    """Una dirección ajena o inexistente responde 401."""
    customer = await resolve_customer(db, user, customer_id)
    address = await store.find_one(customer.id, address_id)
    if address is None:
        raise Unauthorized()
    return {"data": [address]}

@router.post("", response_model=schemas.DataResponse[schemas.AddressResponse], status_code=201)
async def create_address(
    customer_id: int,
    address: schemas.AddressCreate,
    db: AsyncSession = Depends(get_db),
    store: AddressStore = Depends(get_address_store),
    user: models.User = Depends(require_address_access)
):
    """
    **Crear Dirección**

    La primera dirección del cliente queda como dirección por defecto.
    """
    customer = await resolve_customer(db, user, customer_id)
    created = await DefaultAddressPolicy(store).create(customer.id, address.model_dump())
    return {"data": [created]}

@router.put("/{address_id}", response_model=schemas.DataResponse[schemas.AddressResponse])
async def update_address(
    customer_id: int,
    address_id: int,
    address: schemas.AddressUpdate,
    db: AsyncSession = Depends(get_db),
    store: AddressStore = Depends(get_address_store),
    user: models.User = Depends(require_address_access)
):
    """
    **Editar Dirección**

    La dirección editada pasa a ser la de defecto; devuelve todas las del cliente.
    Los campos opcionales ausentes en el cuerpo conservan su valor.
    """
    customer = await resolve_customer(db, user, customer_id)
    fields = address.model_dump(exclude_unset=True)
    addresses = await DefaultAddressPolicy(store).update(customer.id, address_id, fields)
    return {"data": addresses}

@router.delete("/{address_id}", status_code=204)
async def delete_address(
    customer_id: int,
    address_id: int,
    db: AsyncSession = Depends(get_db),
    store: AddressStore = Depends(get_address_store),
    user: models.User = Depends(require_address_access)
):
    """
    **Eliminar Dirección**

    Borrado físico. La dirección por defecto no se puede eliminar.
    """
    customer = await resolve_customer(db, user, customer_id)
    await DefaultAddressPolicy(store).delete(customer.id, address_id)
    return
