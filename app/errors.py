from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FieldError:
    code: str
    message: str
    field: str | None = None

    def as_dict(self) -> dict:
        data = {"code": self.code, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        return data


class StoreApiError(Exception):
    """Error de dominio; el handler de `main` lo traduce al sobre `{errors: [...]}`."""

    status_code = 400
    code = "bad_request"
    default_message = "Bad request"
    field: str | None = None

    def __init__(self, message: str | None = None, *, field: str | None = None, code: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)
        if field is not None:
            self.field = field
        if code is not None:
            self.code = code

    def errors(self) -> list[FieldError]:
        return [FieldError(code=self.code, field=self.field, message=self.message)]


class ValidationFailed(StoreApiError):
    code = "validation_failed"
    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError]):
        super().__init__(errors[0].message if errors else None)
        self._errors = list(errors)

    @classmethod
    def single(cls, code: str, field: str | None, message: str | None = None) -> "ValidationFailed":
        return cls([FieldError(code=code, field=field, message=message or f"{code} validation failed")])

    def errors(self) -> list[FieldError]:
        return list(self._errors)


class Unauthorized(StoreApiError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class Forbidden(StoreApiError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class NotFound(StoreApiError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class DefaultAddressProtected(StoreApiError):
    code = "default_address"
    field = "id_default"
    default_message = "You can not delete your default address"


class StoreFailure(StoreApiError):
    code = "store_failure"
    default_message = "The operation could not be stored"
