from fastapi import APIRouter

from app.api.v1.routes import transactions, goals, system

api_router = APIRouter()

api_router.include_router(system.router)
api_router.include_router(transactions.router)
api_router.include_router(goals.router)
