import logging
from typing import Optional
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from store_common.security import get_current_user, UserPayload
from . import crud, models
from .database import get_db
from .errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


class ActiveUser:
    """
    Dependencia: usuario autenticado y no archivado.

    Si se indica `permission`, además exige que el rol del token la tenga.
    """

    def __init__(self, permission: Optional[str] = None):
        self.permission = permission

    async def __call__(
        self,
        payload: UserPayload = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ) -> models.User:
        if self.permission and not payload.has_permission(self.permission):
            logger.warning(f"Acceso denegado a {payload.sub}: requiere {self.permission}")
            raise Forbidden(f"Access denied, {self.permission} is required")

        user = await crud.get_active_user(db, payload.user_id)
        if user is None:
            # Token válido de un usuario inexistente o archivado
            raise Unauthorized("Unauthorized access")
        return user


async def resolve_customer(db: AsyncSession, user: models.User, customer_id: int) -> models.Customer:
    """El cliente del usuario autenticado debe ser `customer_id`."""
    customer = await crud.get_customer_by_user(db, user.id)
    if customer is None or customer.id != customer_id:
        logger.warning(f"Usuario {user.id} intentó acceder al cliente {customer_id}")
        raise Unauthorized()
    return customer
