"""
Política de dirección por defecto.

Cada cliente tiene a lo sumo una dirección con `is_default`, y exactamente una
en cuanto tiene alguna:

- crear: la primera dirección nace por defecto, las siguientes no.
- editar: la dirección editada pasa a ser la de defecto y el resto deja de serlo.
- borrar: solo se pueden borrar direcciones que no son la de defecto.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from .. import models
from ..crud import AddressStore
from ..errors import DefaultAddressProtected, NotFound, StoreFailure

logger = logging.getLogger(__name__)


class DefaultAddressPolicy:

    def __init__(self, store: AddressStore):
        self.store = store

    async def create(self, customer_id: int, fields: Dict[str, Any]) -> models.Address:
        try:
            await self.store.lock_customer(customer_id)
            has_default = await self.store.find_default(customer_id) is not None
            address = await self.store.create(customer_id, fields, is_default=not has_default)
            await self.store.commit()
        except SQLAlchemyError as e:
            await self._fail("create", customer_id, e)

        logger.info(f"📦 Dirección {address.id} creada para cliente {customer_id} (default={address.is_default})")
        return address

    async def update(self, customer_id: int, address_id: int, fields: Dict[str, Any]) -> List[models.Address]:
        try:
            await self.store.lock_customer(customer_id)
            addresses = await self.store.find_by_customer(customer_id)

            if not any(a.id == address_id for a in addresses):
                raise NotFound("Address not found")

            for address in addresses:
                if address.id == address_id:
                    for key, value in fields.items():
                        setattr(address, key, value)
                    address.is_default = True
                else:
                    address.is_default = False
                await self.store.save(address)

            await self.store.commit()
        except SQLAlchemyError as e:
            await self._fail("update", customer_id, e)

        logger.info(f"📦 Dirección {address_id} es ahora la de defecto del cliente {customer_id}")
        return addresses

    async def delete(self, customer_id: int, address_id: int) -> None:
        try:
            await self.store.lock_customer(customer_id)
            address = await self.store.find_one(customer_id, address_id)

            # Orden fijo: existencia primero, protección después
            if address is None:
                raise NotFound("Address not found")
            if address.is_default:
                raise DefaultAddressProtected()

            if not await self.store.delete_unless_default(address):
                # Promovida o borrada entre la lectura y el borrado
                if await self.store.find_one(customer_id, address_id) is None:
                    raise NotFound("Address not found")
                raise DefaultAddressProtected()

            await self.store.commit()
        except SQLAlchemyError as e:
            await self._fail("delete", customer_id, e)

        logger.info(f"🗑️ Dirección {address_id} eliminada del cliente {customer_id}")

    async def _fail(self, operation: str, customer_id: int, error: SQLAlchemyError):
        logger.error(f"❌ Error guardando direcciones ({operation}) del cliente {customer_id}: {error}")
        await self.store.rollback()
        raise StoreFailure() from error
