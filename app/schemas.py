from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Generic, TypeVar
from datetime import datetime

from .validation import RequiredStr, AlphaStr, Email

T = TypeVar("T")

# --- GENÉRICOS ---
class DataResponse(BaseModel, Generic[T]):
    """Sobre estándar de la API: `{data: [...]}`."""
    data: List[T]

class ItemResponse(BaseModel, Generic[T]):
    """Sobre para lecturas por ID que devuelven un solo objeto."""
    data: T

class ErrorDetail(BaseModel):
    code: str
    field: Optional[str] = None
    message: str

class ErrorResponse(BaseModel):
    errors: List[ErrorDetail]

# --- USUARIOS / AUTH ---
class UserResponse(BaseModel):
    id: int
    email: str
    role_id: int
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class RegisterRequest(BaseModel):
    email: Email
    password: RequiredStr
    role_id: int

class LoginRequest(BaseModel):
    email: RequiredStr
    password: RequiredStr

class Credentials(BaseModel):
    type: str = "bearer"
    token: str
    expires_at: datetime

class LoginResponse(BaseModel):
    credentials: Credentials
    user: UserResponse

class Token(BaseModel):
    access_token: str
    token_type: str

# --- CLIENTES ---
class CustomerBase(BaseModel):
    first_name: AlphaStr = Field(..., description="Nombre (solo letras)")
    last_name: AlphaStr = Field(..., description="Apellido (solo letras)")

class CustomerCreate(CustomerBase):
    """Alta pública de cliente: crea el usuario y su perfil."""
    email: Email
    password: Optional[str] = Field(None, description="Opcional, permite iniciar sesión")

class CustomerUpdate(CustomerBase):
    email: Email

class CustomerResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CustomerAccountResponse(UserResponse):
    """Usuario con su perfil de cliente anidado."""
    customer: Optional[CustomerResponse] = None

# --- DIRECCIONES ---
class AddressBase(BaseModel):
    street1: RequiredStr
    street2: Optional[str] = None
    city: RequiredStr
    zip: RequiredStr
    country: RequiredStr

class AddressCreate(AddressBase):
    pass

class AddressUpdate(AddressBase):
    """Misma forma que el alta: toda edición promueve la dirección a defecto."""
    pass

class AddressResponse(BaseModel):
    id: int
    street1: str
    street2: Optional[str] = None
    city: str
    zip: str
    country: str
    id_default: bool = Field(validation_alias="is_default")
    customer_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# --- CATÁLOGO ---
class CategoryBase(BaseModel):
    name: RequiredStr
    description: RequiredStr

class CategoryCreate(CategoryBase):
    pass

class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ProductCreate(BaseModel):
    name: RequiredStr
    description: RequiredStr
    category_ids: List[int] = Field(default_factory=list, description="IDs de categorías existentes")

class ProductUpdate(BaseModel):
    name: RequiredStr
    description: RequiredStr
    category_ids: Optional[List[int]] = Field(None, description="Si se envía, reemplaza las categorías")

class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# --- CONFIGURACIÓN ---
class SettingCreate(BaseModel):
    key: RequiredStr
    value: RequiredStr

class SettingUpdate(SettingCreate):
    pass

class SettingResponse(BaseModel):
    key: str
    value: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
