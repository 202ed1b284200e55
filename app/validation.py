"""
Validación de payloads.

Convierte los errores de Pydantic en la lista `{code, field, message}` de la API:
`code` es el nombre de la regla que falló (`required`, `email`, `alpha`...).
"""
import re
from typing import Annotated, Any, Dict, Iterable, Optional, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, BeforeValidator, ValidationError
from pydantic_core import PydanticCustomError

from .errors import FieldError, ValidationFailed

M = TypeVar("M", bound=BaseModel)

# Tipos de error de Pydantic -> nombre de la regla expuesta
RULES = {
    "missing": "required",
    "string_type": "string",
    "int_type": "number",
    "int_parsing": "number",
    "int_from_float": "number",
    "float_type": "number",
    "float_parsing": "number",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
    "list_type": "array",
    "dict_type": "object",
    "model_type": "object",
    "model_attributes_type": "object",
    "json_invalid": "json",
    "string_too_short": "minLength",
    "string_too_long": "maxLength",
}

_ALPHA_RE = re.compile(r"^[A-Za-z]+$")
_LOCATIONS = ("body", "query", "path")


def _required(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("required", "required validation failed")
    return value.strip() if isinstance(value, str) else value


def _alpha(value: str) -> str:
    if not _ALPHA_RE.match(value):
        raise PydanticCustomError("alpha", "alpha validation failed")
    return value


def _email(value: str) -> str:
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        raise PydanticCustomError("email", "email validation failed")


RequiredStr = Annotated[str, BeforeValidator(_required)]
AlphaStr = Annotated[str, BeforeValidator(_required), AfterValidator(_alpha)]
Email = Annotated[str, BeforeValidator(_required), AfterValidator(_email)]


def field_errors(errors: Iterable[Dict[str, Any]]) -> list[FieldError]:
    """Traduce `ValidationError.errors()` (o `RequestValidationError.errors()`)."""
    result = []
    for error in errors:
        loc = tuple(error.get("loc") or ())
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        field: Optional[str] = ".".join(str(part) for part in loc) or None
        rule = RULES.get(error["type"], error["type"])
        result.append(FieldError(code=rule, field=field, message=f"{rule} validation failed"))
    return result


def validate(schema: Type[M], body: Optional[Dict[str, Any]]) -> M:
    """Valida `body` contra `schema`; lanza ValidationFailed con un error por campo."""
    try:
        return schema.model_validate(body or {})
    except ValidationError as e:
        raise ValidationFailed(field_errors(e.errors()))
