import os
import tempfile

import pytest
import pytest_asyncio

# Variables de entorno antes de importar la app
_db_dir = tempfile.mkdtemp()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test_db.sqlite3')}"
os.environ["ENV_MODE"] = "test"
os.environ["PASSWORD_HASH_SCHEMES"] = "hex_md5"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from httpx import ASGITransport, AsyncClient  # noqa: E402

from app import schemas  # noqa: E402
from app.database import AsyncSessionLocal, db_manager  # noqa: E402
from app.main import app  # noqa: E402
from app.seed import seed_roles  # noqa: E402
from app.services.auth import AuthService  # noqa: E402
from app.services.customers import CustomerService  # noqa: E402
from store_common.security import create_access_token  # noqa: E402

PASSWORD = "pw12345"


def token_for(user) -> str:
    return create_access_token({"sub": user.email, "role": user.role.name, "user_id": user.id})


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


# ---------- Base de datos ----------
@pytest_asyncio.fixture
async def db_session():
    """Esquema limpio por test, con los roles sembrados."""
    await db_manager.drop_all()
    await db_manager.create_all()
    async with AsyncSessionLocal() as session:
        await seed_roles(session)
        yield session
    await db_manager.engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------- Factories ----------
@pytest.fixture
def customer_factory(db_session):
    async def make_customer(email="customer@example.com", first_name="Jane", last_name="Doe", password=PASSWORD):
        data = schemas.CustomerCreate(email=email, first_name=first_name, last_name=last_name, password=password)
        return await CustomerService.register_customer(db_session, data)

    return make_customer


@pytest_asyncio.fixture
async def customer_user(customer_factory):
    return await customer_factory()


@pytest_asyncio.fixture
async def admin_user(db_session):
    return await AuthService.create_user(db_session, "admin@example.com", PASSWORD, "admin")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def customer_headers(customer_user):
    return auth_headers(customer_user)


@pytest.fixture
def address_payload():
    return {"street1": "rue de la paix", "city": "Paris", "zip": "75000", "country": "France"}
