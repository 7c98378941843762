# app/api/v1/routes/transactions.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import datetime as dt
import logging
import math

from app.schemas.common import ErrorResponse, MessageResponse, ValidationErrorResponse
from app.schemas.transaction import (
    CategorySuggestionRead,
    Pagination,
    TransactionCreate,
    TransactionPage,
    TransactionRead,
    TransactionSummary,
    TransactionUpdate,
)
from app.crud.transaction import (
    MAX_PAGE_SIZE,
    create_transaction,
    delete_transaction,
    get_transaction_by_id,
    get_transaction_summary,
    get_transactions_page,
    update_transaction,
)
from app.core.database import get_async_session
from app.models.transaction import TransactionType
from app.utils.categorization import suggest_category

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)

@router.get("", response_model=TransactionPage)
async def read_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, description=f"Page size, capped at {MAX_PAGE_SIZE}"),
    type: Optional[TransactionType] = Query(None, description="Only income or only expense"),
    db: AsyncSession = Depends(get_async_session),
):
    limit = min(limit, MAX_PAGE_SIZE)
    rows, total = await get_transactions_page(db, page=page, limit=limit, tx_type=type)
    logger.info(f"Fetched transactions page={page} limit={limit} total={total} type={type.value if type else 'all'}")
    return TransactionPage(
        data=[TransactionRead.model_validate(row) for row in rows],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
    )

@router.get("/stats/summary", response_model=TransactionSummary)
async def read_transaction_summary(
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_async_session),
):
    """Totals, counts and averages per type and category, optionally within an inclusive date range."""
    return TransactionSummary(data=await get_transaction_summary(db, start_date, end_date))

@router.get("/suggest-category", response_model=CategorySuggestionRead)
async def read_category_suggestion(
    description: str = Query(..., max_length=500),
):
    suggestion = suggest_category(description)
    return CategorySuggestionRead(category=suggestion.category, confidence=suggestion.confidence)

@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction_endpoint(
    tx_in: TransactionCreate,
    db: AsyncSession = Depends(get_async_session),
):
    # Expenses without a category are auto-categorized from the description
    return await create_transaction(tx_in, db)

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: str,
    db: AsyncSession = Depends(get_async_session),
):
    tx = await get_transaction_by_id(transaction_id, db)
    if not tx:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx

@router.patch("/{transaction_id}", response_model=TransactionRead)
async def update_transaction_endpoint(
    transaction_id: str,
    tx_in: TransactionUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    tx = await update_transaction(transaction_id, tx_in, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx

@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction_endpoint(
    transaction_id: str,
    db: AsyncSession = Depends(get_async_session),
):
    if not await delete_transaction(transaction_id, db):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return MessageResponse(message="Transaction deleted successfully")
