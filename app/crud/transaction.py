# app/crud/transaction.py
import datetime as dt
import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, desc, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.errors import NothingToUpdateError
from app.models.transaction import Transaction, TransactionType
from app.schemas.transaction import TransactionCreate, TransactionUpdate
from app.utils.categorization import DEFAULT_CATEGORY, categorize_expense

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


async def get_transactions_page(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    tx_type: Optional[TransactionType] = None,
) -> Tuple[List[Transaction], int]:
    """Newest first (by date, then creation time). Returns the page and the total row count."""
    query = select(Transaction)
    count_query = select(func.count()).select_from(Transaction)
    if tx_type is not None:
        query = query.where(Transaction.type == tx_type.value)
        count_query = count_query.where(Transaction.type == tx_type.value)

    query = (
        query.order_by(desc(Transaction.date), desc(Transaction.created_at))
        .limit(limit)
        .offset((page - 1) * limit)
    )
    result = await db.execute(query)
    total = (await db.execute(count_query)).scalar_one()
    return result.scalars().all(), total


async def get_transaction_by_id(transaction_id: str, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(Transaction.id == transaction_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def resolve_category(tx_in: TransactionCreate) -> str:
    """Expenses without a real category are classified from their description."""
    category = tx_in.category
    if tx_in.type == TransactionType.expense and (not category or category == DEFAULT_CATEGORY) and tx_in.description:
        category = categorize_expense(tx_in.description)
        logger.info(f"Auto-categorized expense '{tx_in.description}' as '{category}'")
    return category or DEFAULT_CATEGORY


async def create_transaction(tx_in: TransactionCreate, db: AsyncSession) -> Transaction:
    new_tx = Transaction(
        type=tx_in.type.value,
        category=resolve_category(tx_in),
        amount=tx_in.amount,
        description=tx_in.description or "",
        date=tx_in.date,
        source=tx_in.source,
    )
    db.add(new_tx)
    await db.commit()
    await db.refresh(new_tx)
    logger.info(f"Transaction created: id={new_tx.id} type={new_tx.type} amount={new_tx.amount}")
    return new_tx


async def update_transaction(transaction_id: str, tx_in: TransactionUpdate, db: AsyncSession) -> Optional[Transaction]:
    """
    Apply only the supplied fields in a single UPDATE.

    Raises NothingToUpdateError for an empty change-set and returns None
    when no row has the given id.
    """
    changes = tx_in.changes()
    if not changes:
        raise NothingToUpdateError()
    if "description" in changes and changes["description"] is None:
        changes["description"] = ""

    result = await db.execute(
        update(Transaction)
        .where(Transaction.id == transaction_id)
        .values(**changes)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return None
    await db.commit()
    logger.info(f"Transaction updated: id={transaction_id} fields={sorted(changes)}")
    return await get_transaction_by_id(transaction_id, db)


async def delete_transaction(transaction_id: str, db: AsyncSession) -> bool:
    result = await db.execute(delete(Transaction).where(Transaction.id == transaction_id))
    if result.rowcount == 0:
        await db.rollback()
        return False
    await db.commit()
    logger.info(f"Transaction deleted: id={transaction_id}")
    return True


async def get_transaction_summary(
    db: AsyncSession,
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
) -> List[dict]:
    """Sum, count and average per (type, category), biggest totals first. Date bounds are inclusive."""
    query = select(
        Transaction.type,
        Transaction.category,
        func.sum(Transaction.amount).label("total"),
        func.count().label("count"),
        func.avg(Transaction.amount).label("average"),
    )
    if start_date is not None:
        query = query.where(Transaction.date >= start_date)
    if end_date is not None:
        query = query.where(Transaction.date <= end_date)
    query = query.group_by(Transaction.type, Transaction.category).order_by(desc("total"))

    result = await db.execute(query)
    return [dict(row) for row in result.mappings().all()]
