from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.schemas.response import APIResponse
from app.schemas.stats import BarCharts, DashboardStats, LineCharts, PieCharts
from app.services.stats import stats_service
from app.utils import deps

router = APIRouter(dependencies=[Depends(deps.require_admin)])


@router.get("/stats", response_model=APIResponse[DashboardStats])
async def get_dashboard_stats(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    stats = await stats_service.get_dashboard_stats(db, cache)
    return APIResponse(message="Dashboard stats retrieved successfully", data=stats)


@router.get("/pie", response_model=APIResponse[PieCharts])
async def get_pie_charts(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    charts = await stats_service.get_pie_charts(db, cache)
    return APIResponse(message="Pie charts retrieved successfully", data=charts)


@router.get("/bar", response_model=APIResponse[BarCharts])
async def get_bar_charts(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    charts = await stats_service.get_bar_charts(db, cache)
    return APIResponse(message="Bar charts retrieved successfully", data=charts)


@router.get("/line", response_model=APIResponse[LineCharts])
async def get_line_charts(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    charts = await stats_service.get_line_charts(db, cache)
    return APIResponse(message="Line charts retrieved successfully", data=charts)
