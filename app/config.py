import os

# Estandarizamos a DATABASE_URL para coincidir con el docker-compose
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./store.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:4200").split(",") if o.strip()
]

# Roles que se crean al arrancar (seed idempotente)
ROLES = [r.strip() for r in os.getenv("ROLES", "admin,customer").split(",") if r.strip()]
ADMIN_ROLE = "admin"
CUSTOMER_ROLE = "customer"
DEFAULT_ROLE = os.getenv("DEFAULT_ROLE", CUSTOMER_ROLE)

# true: lectura-modificación-escritura de direcciones en una sola transacción
# false: cada fila se confirma por separado (comportamiento histórico)
ADDRESS_ATOMIC_WRITES = os.getenv("ADDRESS_ATOMIC_WRITES", "true").lower() in ("1", "true", "yes")
