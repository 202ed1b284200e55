from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from . import database, seed
from .config import CORS_ORIGINS, LOG_LEVEL
from .errors import FieldError, StoreApiError, StoreFailure, ValidationFailed
from .routers import addresses, auth, categories, customers, products, settings
from .validation import field_errors

# Logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("store-api")

API_PREFIX = "/api/v1"

HTTP_ERROR_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Crear tablas y roles si no existen (Solo Dev)
    await database.db_manager.create_all()
    async with database.AsyncSessionLocal() as db:
        await seed.seed_roles(db)
    logger.info("🚀 Store API lista.")
    yield


app = FastAPI(
    title="Store API",
    description="API de tienda: usuarios, clientes, direcciones, productos, categorías y parámetros.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, errors, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"errors": [e.as_dict() for e in errors]},
        headers=headers,
    )

# --- MANEJO DE ERRORES (sobre uniforme `{errors: [...]}`) ---

@app.exception_handler(StoreApiError)
async def store_api_error_handler(request: Request, exc: StoreApiError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return error_response(exc.status_code, exc.errors())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = ValidationFailed(field_errors(exc.errors())).errors()
    logger.info(f"{request.method} {request.url.path} -> 400 ({len(errors)} errores de validación)")
    return error_response(400, errors)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    return error_response(
        exc.status_code,
        [FieldError(code=code, message=str(exc.detail))],
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(SQLAlchemyError)
async def store_failure_handler(request: Request, exc: SQLAlchemyError):
    # Sin reintentos: se informa como fallo genérico
    logger.error(f"❌ Error de base de datos en {request.method} {request.url.path}: {exc}")
    failure = StoreFailure()
    return error_response(failure.status_code, failure.errors())

# --- ENDPOINTS ---

@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(customers.router, prefix=API_PREFIX)
app.include_router(addresses.router, prefix=API_PREFIX)
app.include_router(products.router, prefix=API_PREFIX)
app.include_router(categories.router, prefix=API_PREFIX)
app.include_router(settings.router, prefix=API_PREFIX)
