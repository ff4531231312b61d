from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.api.dependencies import verify_webhook_token, verify_admin_token
from app.core.exceptions import CouldNotImportOrder
from app.db.session import get_db
from app.schemas.order import OrderPayload, ImportResult, QuoteResponse
from app.services.order_import import import_order, get_quote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["orders"])


@router.post("/channable/orders", response_model=ImportResult, dependencies=[Depends(verify_webhook_token)])
async def receive_order(
    payload: OrderPayload,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await import_order(db, payload)
    except CouldNotImportOrder as e:
        logger.error(f"Channable order {payload.channable_id} not imported: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"validated": "false", "errors": str(e)},
        )


@router.get("/quotes/{quote_id}", response_model=QuoteResponse, dependencies=[Depends(verify_admin_token)])
async def read_quote(
    quote_id: int,
    db: AsyncSession = Depends(get_db)
):
    quote = await get_quote(db, quote_id)
    if not quote:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return quote
