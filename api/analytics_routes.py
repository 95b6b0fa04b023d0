from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from data.database import Tenant
from models.analytics import AnalyticsQuery, AnalyticsSummary
from services import analytics
from api.depends import CURRENT_TENANT, DB_DEPENDENCY

import logging

logger = logging.getLogger(__name__)

analytics_router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
)


# GET /analytics/summary
@analytics_router.get("/summary", response_model=AnalyticsSummary)
def get_summary_route(
    tenant: Tenant = CURRENT_TENANT,
    db: Session = DB_DEPENDENCY,
    start_date: str | None = Query(default=None, alias="startDate"),   # YYYY-MM-DD or ISO datetime
    end_date: str | None = Query(default=None, alias="endDate"),       # whole day is included
    experiment_id: str | None = Query(default=None, alias="experimentId")
):
    """Get aggregated analytics metrics, broken down by variant."""
    try:
        query = AnalyticsQuery(start_date=start_date, end_date=end_date, experiment_id=experiment_id)
    except ValidationError as e:
        logger.info("analytics query validation error: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.errors(include_url=False, include_context=False))

    return analytics.get_summary(db, tenant.id, query)
