import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from store_common.security import Permissions
from .. import crud, schemas, models
from ..database import get_db
from ..errors import FieldError, NotFound, ValidationFailed
from ..security import ActiveUser
from ..validation import validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])

require_settings_access = ActiveUser(Permissions.SETTING_MANAGE)


@router.get("", response_model=schemas.DataResponse[schemas.SettingResponse])
async def read_settings(
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(require_settings_access)
):
    return {"data": await crud.get_settings(db)}

@router.get("/{key}", response_model=schemas.SettingResponse)
async def read_setting(
    key: str,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(require_settings_access)
):
    """Devuelve el parámetro tal cual, sin sobre `data`."""
    setting = await crud.get_setting(db, key)
    if setting is None:
        raise NotFound("Setting not found")
    return setting

@router.post("", response_model=schemas.SettingResponse)
async def create_setting(
    setting: schemas.SettingCreate,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(require_settings_access)
):
    """Crea un parámetro. La clave es única."""
    logger.info(f"Creando parámetro {setting.key}")
    if await crud.get_setting(db, setting.key):
        raise ValidationFailed.single("unique", "key")
    return await crud.create_setting(db, setting.key, setting.value)

@router.put("", response_model=schemas.SettingResponse)
async def update_setting(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(require_settings_access)
):
    """
    **Actualizar Parámetro**

    La clave viaja en el cuerpo. Un cuerpo inválido responde `invalid_data`.
    """
    try:
        data = validate(schemas.SettingUpdate, payload)
    except ValidationFailed:
        raise ValidationFailed([FieldError(code="invalid_data", message="Invalid data")])

    logger.info(f"Actualizando parámetro {data.key}")
    setting = await crud.get_setting(db, data.key)
    if setting is None:
        raise NotFound("Setting not found")
    return await crud.update_setting(db, setting, data.value)

@router.delete("/{key}", status_code=204)
async def delete_setting(
    key: str,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(require_settings_access)
):
    logger.info(f"Eliminando parámetro {key}")
    setting = await crud.get_setting(db, key)
    if setting is None:
        raise NotFound("Setting not found")
    await crud.delete_setting(db, setting)
    return
