import logging
from sqlalchemy.ext.asyncio import AsyncSession

from store_common import security
from .. import crud, schemas
from ..config import DEFAULT_ROLE
from ..errors import InvalidCredentials, ValidationFailed

logger = logging.getLogger(__name__)


class AuthService:

    @staticmethod
    async def register_user(db: AsyncSession, data: schemas.RegisterRequest):
        # 1. Verificar duplicados y rol
        if await crud.get_user_by_email(db, email=data.email):
            raise ValidationFailed.single("unique", "email")
        if not await crud.get_role_by_id(db, data.role_id):
            raise ValidationFailed.single("exists", "role_id")

        # 2. Guardar
        user = await crud.create_user(db, {
            "email": data.email,
            "hashed_password": security.get_password_hash(data.password),
            "role_id": data.role_id,
        })
        logger.info(f"Usuario registrado: {user.email}")
        return user

    @staticmethod
    async def create_user(db: AsyncSession, email: str, password: str, role_name: str = None):
        """Alta directa (comando de consola). Usa el rol por defecto si no se indica."""
        role = await crud.get_role_by_name(db, role_name or DEFAULT_ROLE)
        if role is None:
            raise ValidationFailed.single("exists", "role")
        if await crud.get_user_by_email(db, email=email):
            raise ValidationFailed.single("unique", "email")

        return await crud.create_user(db, {
            "email": email,
            "hashed_password": security.get_password_hash(password),
            "role_id": role.id,
        })

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str):
        # 1. Validar Credenciales (los usuarios archivados no entran)
        user = await crud.get_user_by_email(db, email)
        if not user or user.deleted_at is not None or not security.verify_password(password, user.hashed_password):
            logger.warning(f"Intento de login fallido para {email}")
            raise InvalidCredentials()

        # 2. Generar Token
        expires_at = security.access_token_expiration()
        token = security.create_access_token(
            data={
                "sub": user.email,
                "role": user.role.name,
                "user_id": user.id
            },
            expires_at=expires_at
        )
        return user, token, expires_at

    @staticmethod
    async def login(db: AsyncSession, email: str, password: str) -> dict:
        user, token, expires_at = await AuthService.authenticate_user(db, email, password)
        return {
            "credentials": {"type": "bearer", "token": token, "expires_at": expires_at},
            "user": user,
        }
