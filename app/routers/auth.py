from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas, models
from ..database import get_db
from ..security import ActiveUser
from ..services.auth import AuthService

router = APIRouter(tags=["Auth"])

# --- ENDPOINTS PÚBLICOS ---

@router.post("/register", response_model=schemas.UserResponse, status_code=201)
async def register(request: schemas.RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Registro de un usuario con un rol existente."""
    return await AuthService.register_user(db, request)

@router.post("/login", response_model=schemas.LoginResponse)
async def login(request: schemas.LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    **Login**

    Devuelve un token bearer y el usuario autenticado.

    **Errores:**
    - `401 Unauthorized`: credenciales inválidas o usuario archivado.
    """
    return await AuthService.login(db, email=request.email, password=request.password)

@router.post("/token", response_model=schemas.Token, include_in_schema=False)
async def login_swagger(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    """Login para Swagger (formulario OAuth2, `username` = email)."""
    _, token, _ = await AuthService.authenticate_user(db, email=form_data.username, password=form_data.password)
    return {"access_token": token, "token_type": "bearer"}

# --- ENDPOINTS PROTEGIDOS ---

@router.get("/me", response_model=schemas.UserResponse)
async def read_users_me(current_user: models.User = Depends(ActiveUser())):
    return current_user
