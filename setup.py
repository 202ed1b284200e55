from setuptools import setup, find_packages

setup(
    name="store-api",
    version="1.0.0",
    packages=find_packages(exclude=("tests", "tests.*", "migrations", "migrations.*")),
    install_requires=[
        "fastapi",
        "python-multipart",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt==4.0.1",
        "sqlalchemy[asyncio]>=2.0",
        "asyncpg",
        "aiosqlite",
        "alembic",
        "pydantic[email]>=2",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
