# app/crud/goal.py
import logging
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.errors import GoalAmountConflictError, NothingToUpdateError
from app.models.goal import Goal
from app.schemas.goal import GoalCreate, GoalUpdate

logger = logging.getLogger(__name__)


async def get_goals(db: AsyncSession) -> List[Goal]:
    result = await db.execute(select(Goal).order_by(Goal.deadline.asc()))
    return result.scalars().all()


async def get_goal_by_id(goal_id: str, db: AsyncSession) -> Optional[Goal]:
    result = await db.execute(
        select(Goal).where(Goal.id == goal_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_goal(goal_in: GoalCreate, db: AsyncSession) -> Goal:
    values = goal_in.model_dump()
    values["notes"] = values.get("notes") or ""
    new_goal = Goal(**values)
    db.add(new_goal)
    await db.commit()
    await db.refresh(new_goal)
    logger.info(f"Goal created: id={new_goal.id} name={new_goal.name} target={new_goal.target_amount}")
    return new_goal


async def update_goal(goal_id: str, goal_in: GoalUpdate, db: AsyncSession) -> Optional[Goal]:
    """
    Apply only the supplied fields in a single UPDATE.

    When just one of the two amounts changes, the statement itself checks it
    against the stored counterpart so current_amount never ends up above
    target_amount. Returns None when no row has the given id.
    """
    changes = goal_in.changes()
    if not changes:
        raise NothingToUpdateError()
    if "notes" in changes and changes["notes"] is None:
        changes["notes"] = ""

    stmt = update(Goal).where(Goal.id == goal_id)
    if "current_amount" in changes and "target_amount" not in changes:
        stmt = stmt.where(Goal.target_amount >= changes["current_amount"])
    elif "target_amount" in changes and "current_amount" not in changes:
        stmt = stmt.where(Goal.current_amount <= changes["target_amount"])

    result = await db.execute(stmt.values(**changes).execution_options(synchronize_session=False))
    if result.rowcount == 0:
        await db.rollback()
        if await get_goal_by_id(goal_id, db) is None:
            return None
        raise GoalAmountConflictError()

    await db.commit()
    logger.info(f"Goal updated: id={goal_id} fields={sorted(changes)}")
    return await get_goal_by_id(goal_id, db)


async def delete_goal(goal_id: str, db: AsyncSession) -> bool:
    result = await db.execute(delete(Goal).where(Goal.id == goal_id))
    if result.rowcount == 0:
        await db.rollback()
        return False
    await db.commit()
    logger.info(f"Goal deleted: id={goal_id}")
    return True
