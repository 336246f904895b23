"""Report API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from practice.database import get_db
from practice.data.client_utils import get_client_or_404
from practice.reports.comparison import get_service_comparison
from practice.reports.dashboard import get_dashboard
from practice.reports.progress import get_progress_analysis
from practice.reports.schemas import (
    BudgetSummaryResponse,
    DashboardResponse,
    FundUtilizationResponse,
    ProgressAnalysisResponse,
    ServiceComparisonResponse,
)
from practice.reports.timeline import get_fund_utilization
from practice.reports.utilization import get_budget_summary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/clients/{client_id}/budget-summary", response_model=BudgetSummaryResponse)
async def budget_summary(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Utilisation summary of the client's active plan."""
    await get_client_or_404(db, client_id)
    try:
        summary = await get_budget_summary(db, client_id)
    except Exception as e:
        logger.exception(f"Budget summary failed for client {client_id}")
        raise HTTPException(status_code=500, detail=f"Error calculating budget summary: {str(e)}")

    if summary is None:
        raise HTTPException(status_code=404, detail="No active budget plan with items for this client")
    return summary


@router.get("/clients/{client_id}/fund-utilization", response_model=FundUtilizationResponse)
async def fund_utilization(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Fund utilisation timeline for the client's active plan.

    Missing plan data falls back to a default plan period and budget.
    """
    await get_client_or_404(db, client_id)
    try:
        return await get_fund_utilization(db, client_id)
    except Exception as e:
        logger.exception(f"Fund utilisation failed for client {client_id}")
        raise HTTPException(status_code=500, detail=f"Error calculating fund utilization: {str(e)}")


@router.get("/clients/{client_id}/service-comparison", response_model=ServiceComparisonResponse)
async def service_comparison(
    client_id: str,
    comparison_type: str = Query(default="similar", pattern="^(similar|budget|top)$"),
    db: AsyncSession = Depends(get_db)
):
    """Compare the client's category utilisation with a cohort of other clients."""
    await get_client_or_404(db, client_id)
    try:
        comparison = await get_service_comparison(db, client_id, comparison_type)
    except Exception as e:
        logger.exception(f"Service comparison failed for client {client_id}")
        raise HTTPException(status_code=500, detail=f"Error calculating service comparison: {str(e)}")

    if comparison is None:
        raise HTTPException(status_code=404, detail="No active budget plan with items for this client")
    return comparison


@router.get("/clients/{client_id}/progress", response_model=ProgressAnalysisResponse)
async def progress_analysis(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Attendance and goal progress for the client."""
    await get_client_or_404(db, client_id)
    try:
        return await get_progress_analysis(db, client_id)
    except Exception as e:
        logger.exception(f"Progress analysis failed for client {client_id}")
        raise HTTPException(status_code=500, detail=f"Error calculating progress: {str(e)}")


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(db: AsyncSession = Depends(get_db)):
    """Practice dashboard: appointment volumes and expiring plans."""
    try:
        return await get_dashboard(db)
    except Exception as e:
        logger.exception("Dashboard calculation failed")
        raise HTTPException(status_code=500, detail=f"Error calculating dashboard: {str(e)}")
