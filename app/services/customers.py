import logging
from sqlalchemy.ext.asyncio import AsyncSession

from store_common import security
from .. import crud, schemas
from ..config import CUSTOMER_ROLE
from ..errors import NotFound, ValidationFailed
from ..validation import validate

logger = logging.getLogger(__name__)


class CustomerService:

    @staticmethod
    async def list_customers(db: AsyncSession):
        return await crud.get_customer_accounts(db, CUSTOMER_ROLE)

    @staticmethod
    async def get_customer(db: AsyncSession, user_id: int):
        user = await crud.get_active_user(db, user_id)
        if not user:
            raise NotFound("Customer not found")
        return user

    @staticmethod
    async def register_customer(db: AsyncSession, data: schemas.CustomerCreate):
        """Crea el usuario con rol cliente y su perfil en una sola transacción."""
        if await crud.get_user_by_email(db, email=data.email):
            raise ValidationFailed.single("unique", "email")

        role = await crud.get_role_by_name(db, CUSTOMER_ROLE)
        if role is None:
            raise ValidationFailed.single("exists", "role")

        user = await crud.create_customer_account(
            db,
            user_data={
                "email": data.email,
                "hashed_password": security.get_password_hash(data.password) if data.password else None,
                "role_id": role.id,
            },
            customer_data={"first_name": data.first_name, "last_name": data.last_name},
        )
        logger.info(f"Cliente creado: {user.email} (usuario {user.id})")
        return user

    @staticmethod
    async def update_customer(db: AsyncSession, user_id: int, body: dict):
        # 1. Existencia antes que validación
        user = await CustomerService.get_customer(db, user_id)
        data = validate(schemas.CustomerUpdate, body)

        # 2. Email único salvo el propio
        existing = await crud.get_user_by_email(db, email=data.email)
        if existing and existing.id != user.id:
            raise ValidationFailed.single("unique", "email")

        user = await crud.update_customer_account(
            db, user, data.email, {"first_name": data.first_name, "last_name": data.last_name}
        )
        logger.info(f"Cliente actualizado: usuario {user.id}")
        return user

    @staticmethod
    async def delete_customer(db: AsyncSession, user_id: int):
        """Borrado lógico del usuario; sus direcciones y perfil se conservan."""
        user = await CustomerService.get_customer(db, user_id)
        await crud.soft_delete_user(db, user)
        logger.info(f"Cliente archivado: usuario {user.id}")
