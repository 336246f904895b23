"""Data API routes - CRUD for every practice record, mounted under one router."""
from fastapi import APIRouter

from practice.data.clients.routes import router as clients_router
from practice.data.allies.routes import router as allies_router
from practice.data.goals.routes import router as goals_router
from practice.data.budget.routes import router as budget_router
from practice.data.sessions.routes import router as sessions_router
from practice.data.strategies.routes import router as strategies_router
from practice.data.clinicians.routes import router as clinicians_router

router = APIRouter()

router.include_router(clients_router, tags=["Clients"])
router.include_router(allies_router, tags=["Allies"])
router.include_router(goals_router, tags=["Goals"])
router.include_router(budget_router, tags=["Budget"])
router.include_router(sessions_router, tags=["Sessions"])
router.include_router(strategies_router, tags=["Strategies"])
router.include_router(clinicians_router, tags=["Clinicians"])
