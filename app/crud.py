from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from sqlalchemy import delete
from . import models

# --- ROLES ---
async def get_role_by_name(db: AsyncSession, name: str):
    query = select(models.Role).filter(models.Role.name == name)
    result = await db.execute(query)
    return result.scalars().first()

async def get_role_by_id(db: AsyncSession, role_id: int):
    return await db.get(models.Role, role_id)

async def create_role(db: AsyncSession, name: str):
    db_role = models.Role(name=name)
    db.add(db_role)
    await db.flush()
    return db_role

# --- USUARIOS ---
def _user_query():
    return select(models.User).options(
        selectinload(models.User.role),
        selectinload(models.User.customer),
    )

async def get_user_by_email(db: AsyncSession, email: str):
    """Busca un usuario por email (incluye los archivados, el email sigue reservado)."""
    query = _user_query().filter(models.User.email == email)
    result = await db.execute(query)
    return result.scalars().first()

async def get_active_user(db: AsyncSession, user_id: int):
    """Busca un usuario por ID descartando los borrados lógicamente."""
    query = _user_query().filter(
        models.User.id == user_id,
        models.User.deleted_at.is_(None)
    )
    result = await db.execute(query)
    return result.scalars().first()

async def create_user(db: AsyncSession, user_data: Dict[str, Any]):
    db_user = models.User(**user_data)
    db.add(db_user)
    await db.commit()

    # Recargar con relaciones
    return await get_active_user(db, db_user.id)

async def soft_delete_user(db: AsyncSession, user: models.User):
    """Borrado lógico: el registro se conserva con `deleted_at`."""
    user.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    return user

# --- CLIENTES ---
async def get_customer_accounts(db: AsyncSession, role_name: str) -> Sequence[models.User]:
    """Usuarios activos con el rol de cliente, con su perfil cargado."""
    query = (
        _user_query()
        .join(models.User.role)
        .filter(
            models.Role.name == role_name,
            models.User.deleted_at.is_(None)
        )
        .order_by(models.User.id.asc())
    )
    result = await db.execute(query)
    return result.scalars().all()

async def get_customer_by_user(db: AsyncSession, user_id: int):
    query = select(models.Customer).filter(models.Customer.user_id == user_id)
    result = await db.execute(query)
    return result.scalars().first()

async def create_customer_account(db: AsyncSession, user_data: Dict[str, Any], customer_data: Dict[str, Any]):
    """Transacción atómica: usuario + perfil de cliente."""
    db_user = models.User(**user_data)
    db.add(db_user)
    await db.flush() # Genera ID del usuario

    db.add(models.Customer(**customer_data, user_id=db_user.id))
    await db.commit()

    return await get_active_user(db, db_user.id)

async def update_customer_account(db: AsyncSession, user: models.User, email: str, customer_data: Dict[str, Any]):
    user.email = email
    if user.customer is not None:
        for key, value in customer_data.items():
            setattr(user.customer, key, value)
    await db.commit()
    return await get_active_user(db, user.id)

# --- DIRECCIONES ---
class AddressStore:
    """
    Acceso a las direcciones de un cliente.

    Con `atomic=True` las escrituras solo hacen flush y la política confirma
    una vez al final; con `atomic=False` cada `save` confirma su fila.
    """

    def __init__(self, db: AsyncSession, atomic: bool = True):
        self.db = db
        self.atomic = atomic

    async def lock_customer(self, customer_id: int):
        """Bloquea la fila del cliente (SELECT ... FOR UPDATE) hasta el commit."""
        if not self.atomic:
            return None
        query = select(models.Customer.id).filter(models.Customer.id == customer_id).with_for_update()
        result = await self.db.execute(query)
        return result.scalar()

    async def find_by_customer(self, customer_id: int) -> List[models.Address]:
        query = (
            select(models.Address)
            .filter(models.Address.customer_id == customer_id)
            .order_by(models.Address.id.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_one(self, customer_id: int, address_id: int) -> Optional[models.Address]:
        # populate_existing: `is_default` puede haber cambiado en otra sesión
        query = select(models.Address).filter(
            models.Address.id == address_id,
            models.Address.customer_id == customer_id
        ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def find_default(self, customer_id: int) -> Optional[models.Address]:
        query = select(models.Address).filter(
            models.Address.customer_id == customer_id,
            models.Address.is_default.is_(True)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def create(self, customer_id: int, fields: Dict[str, Any], is_default: bool) -> models.Address:
        db_address = models.Address(**fields, is_default=is_default, customer_id=customer_id)
        self.db.add(db_address)
        await self._write()
        return db_address

    async def save(self, address: models.Address):
        self.db.add(address)
        await self._write()

    async def delete_unless_default(self, address: models.Address) -> bool:
        """Borra la fila solo si sigue sin ser la de defecto. Devuelve si se borró."""
        query = (
            delete(models.Address)
            .where(
                models.Address.id == address.id,
                models.Address.is_default.is_(False)
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(query)
        if result.rowcount == 0:
            return False

        self.db.expunge(address)
        await self._write()
        return True

    async def commit(self):
        await self.db.commit()

    async def rollback(self):
        await self.db.rollback()

    async def _write(self):
        if self.atomic:
            await self.db.flush()
        else:
            await self.db.commit()

# --- CATEGORÍAS ---
async def get_categories(db: AsyncSession):
    result = await db.execute(select(models.Category).order_by(models.Category.id.asc()))
    return result.scalars().all()

async def get_category(db: AsyncSession, category_id: int):
    return await db.get(models.Category, category_id)

async def get_categories_by_ids(db: AsyncSession, category_ids: List[int]):
    if not category_ids:
        return []
    query = select(models.Category).filter(models.Category.id.in_(category_ids))
    result = await db.execute(query)
    return list(result.scalars().all())

async def create_category(db: AsyncSession, category_data: Dict[str, Any]):
    db_category = models.Category(**category_data)
    db.add(db_category)
    await db.commit()
    await db.refresh(db_category)
    return db_category

async def update_category(db: AsyncSession, category: models.Category, category_data: Dict[str, Any]):
    for key, value in category_data.items():
        setattr(category, key, value)
    await db.commit()
    await db.refresh(category)
    return category

async def delete_category(db: AsyncSession, category: models.Category):
    # Limpiamos la tabla pivote explícitamente (SQLite no aplica ON DELETE sin PRAGMA)
    await db.execute(delete(models.category_product).where(models.category_product.c.category_id == category.id))
    await db.delete(category)
    await db.commit()

# --- PRODUCTOS ---
async def get_products(db: AsyncSession):
    result = await db.execute(select(models.Product).order_by(models.Product.id.asc()))
    return result.scalars().all()

async def get_product(db: AsyncSession, product_id: int, with_categories: bool = False):
    query = select(models.Product).filter(models.Product.id == product_id)
    if with_categories:
        query = query.options(selectinload(models.Product.categories))
    result = await db.execute(query)
    return result.scalars().first()

async def create_product(db: AsyncSession, product_data: Dict[str, Any], categories: List[models.Category]):
    db_product = models.Product(**product_data)
    db_product.categories = categories
    db.add(db_product)
    await db.commit()
    await db.refresh(db_product)
    return db_product

async def update_product(
    db: AsyncSession,
    product: models.Product,
    product_data: Dict[str, Any],
    categories: Optional[List[models.Category]] = None
):
    """`product` debe venir con `categories` cargadas si se van a reemplazar."""
    for key, value in product_data.items():
        setattr(product, key, value)
    if categories is not None:
        product.categories = categories
    await db.commit()
    await db.refresh(product)
    return product

async def delete_product(db: AsyncSession, product: models.Product):
    await db.execute(delete(models.category_product).where(models.category_product.c.product_id == product.id))
    await db.delete(product)
    await db.commit()

# --- CONFIGURACIÓN ---
async def get_settings(db: AsyncSession):
    result = await db.execute(select(models.Setting).order_by(models.Setting.key.asc()))
    return result.scalars().all()

async def get_setting(db: AsyncSession, key: str):
    return await db.get(models.Setting, key)

async def create_setting(db: AsyncSession, key: str, value: str):
    db_setting = models.Setting(key=key, value=value)
    db.add(db_setting)
    await db.commit()
    await db.refresh(db_setting)
    return db_setting

async def update_setting(db: AsyncSession, setting: models.Setting, value: str):
    setting.value = value
    await db.commit()
    await db.refresh(setting)
    return setting

async def delete_setting(db: AsyncSession, setting: models.Setting):
    await db.delete(setting)
    await db.commit()
