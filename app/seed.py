import asyncio
import logging
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.config import ROLES
from app.database import AsyncSessionLocal, db_manager

logger = logging.getLogger(__name__)


async def seed_roles(db: AsyncSession, roles=None):
    """Crea los roles configurados que aún no existen. Idempotente."""
    created = []
    for name in roles or ROLES:
        if await crud.get_role_by_name(db, name) is None:
            await crud.create_role(db, name)
            created.append(name)
    await db.commit()

    if created:
        logger.info(f"✅ [SEED] Roles creados: {', '.join(created)}")
    return created


async def main():
    await db_manager.create_all()
    async with AsyncSessionLocal() as db:
        try:
            await seed_roles(db)
        except Exception as e:
            logger.error(f"❌ [SEED] Error crítico: {e}")
            await db.rollback()
            raise


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
