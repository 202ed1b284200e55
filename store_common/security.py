from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import os
from typing import Optional

# Configuración Criptográfica
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "SECRET_SUPER_SECRETO_CAMBIAME")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Esquemas de hash separados por coma (tests usan uno rápido)
PASSWORD_HASH_SCHEMES = [
    s.strip() for s in os.getenv("PASSWORD_HASH_SCHEMES", "bcrypt").split(",") if s.strip()
]

pwd_context = CryptContext(schemes=PASSWORD_HASH_SCHEMES, deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/token")

# --- UTILIDADES ---
def verify_password(plain_password, hashed_password):
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def access_token_expiration(expires_delta: Optional[timedelta] = None) -> datetime:
    return datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

def create_access_token(data: dict, expires_at: Optional[datetime] = None):
    to_encode = data.copy()
    expire = expires_at or access_token_expiration()

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def decode_token(token: str):
    """Decodifica el token, devuelve None si la firma o la expiración fallan."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

# --- PERMISOS ---
class Permissions:
    # CATÁLOGO
    PRODUCT_MANAGE = "product:manage"
    CATEGORY_MANAGE = "category:manage"

    # CLIENTES
    CUSTOMER_READ = "customer:read"
    CUSTOMER_MANAGE = "customer:manage"
    ADDRESS_MANAGE = "address:manage"

    # SISTEMA
    SETTING_MANAGE = "setting:manage"

ROLE_PERMISSIONS = {
    "admin": ["*"],

    "customer": [
        Permissions.ADDRESS_MANAGE,
    ],
}

# --- DEPENDENCIAS FASTAPI ---
class UserPayload:
    def __init__(self, sub: str, role: str, user_id: int):
        self.sub = sub
        self.role = role
        self.user_id = user_id
        self.permissions = ROLE_PERMISSIONS.get(role, [])

    def has_permission(self, required_perm: str) -> bool:
        if "*" in self.permissions: return True
        return required_perm in self.permissions

def get_current_user(token: str = Depends(oauth2_scheme)) -> UserPayload:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized access",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        raise credentials_exception

    email: str = payload.get("sub")
    role: str = payload.get("role")
    user_id: int = payload.get("user_id")

    if email is None or user_id is None:
        raise credentials_exception

    return UserPayload(sub=email, role=role, user_id=user_id)
