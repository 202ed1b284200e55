"""
Comandos de consola.

    python -m app.commands create-user --email admin@example.com --password secret --role admin
"""
import argparse
import asyncio
import logging
import sys

from app.database import AsyncSessionLocal, db_manager
from app.errors import ValidationFailed
from app.seed import seed_roles
from app.services.auth import AuthService

logger = logging.getLogger("store-api.commands")


async def create_user(email: str, password: str, role: str = None) -> int:
    await db_manager.create_all()
    async with AsyncSessionLocal() as db:
        await seed_roles(db)
        try:
            user = await AuthService.create_user(db, email, password, role)
        except ValidationFailed as e:
            for error in e.errors():
                logger.error(f"❌ {error.field}: {error.message}")
            return 1

    logger.info(f"✅ Usuario {user.email} creado (id={user.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.commands")
    subcommands = parser.add_subparsers(dest="command", required=True)

    create = subcommands.add_parser("create-user", help="Crea un usuario con email y contraseña")
    create.add_argument("--email", required=True, help="Email para iniciar sesión")
    create.add_argument("--password", required=True, help="Contraseña para iniciar sesión")
    create.add_argument("--role", default=None, help="Rol (por defecto: customer)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "create-user":
        return asyncio.run(create_user(args.email, args.password, args.role))
    return 2


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
