from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import verify_admin_token
from app.db.session import get_db
from app.schemas.config import ConfigSaveRequest, ConfigSaveResponse
from app.services.config import save_config_section


router = APIRouter(prefix="/api/v1/admin", tags=["config"], dependencies=[Depends(verify_admin_token)])


@router.post("/config/{section}", response_model=ConfigSaveResponse)
async def save_config(
    section: str,
    data: ConfigSaveRequest,
    db: AsyncSession = Depends(get_db)
):
    try:
        result = await save_config_section(db, section, data.store_id, data.values)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ConfigSaveResponse(section=section, **result)
