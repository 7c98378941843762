# app/api/v1/routes/goals.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.schemas.common import ErrorResponse, MessageResponse, ValidationErrorResponse
from app.schemas.goal import GoalCreate, GoalRead, GoalUpdate
from app.crud.goal import (
    create_goal,
    delete_goal,
    get_goal_by_id,
    get_goals,
    update_goal,
)
from app.core.database import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": ErrorResponse}},
)

@router.get("", response_model=List[GoalRead])
async def read_goals(
    db: AsyncSession = Depends(get_async_session),
):
    """All savings goals, nearest deadline first."""
    goals = await get_goals(db)
    logger.info(f"Fetched goals count={len(goals)}")
    return goals

@router.post("", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal_endpoint(
    goal_in: GoalCreate,
    db: AsyncSession = Depends(get_async_session),
):
    return await create_goal(goal_in, db)

@router.get("/{goal_id}", response_model=GoalRead)
async def read_goal(
    goal_id: str,
    db: AsyncSession = Depends(get_async_session),
):
    goal = await get_goal_by_id(goal_id, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal_endpoint(
    goal_id: str,
    goal_in: GoalUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    goal = await update_goal(goal_id, goal_in, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

@router.delete("/{goal_id}", response_model=MessageResponse)
async def delete_goal_endpoint(
    goal_id: str,
    db: AsyncSession = Depends(get_async_session),
):
    if not await delete_goal(goal_id, db):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return MessageResponse(message="Goal deleted successfully")
