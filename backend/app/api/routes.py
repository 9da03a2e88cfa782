from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
from app.core.config import settings
from app.core.errors import InputFetchError
from app.models.schemas import (
    PriorityReportPage, ReportType, TeamPerformanceMetrics,
    TeamPerformanceSummary, StaffWorkloadDetail, HealthResponse, ErrorResponse
)
from app.services.orchestrator import (
    get_unassigned_priority_reports, get_team_performance_metrics,
    get_team_performance_summary, get_staff_workload
)
from app.db.database import database_reachable
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

FETCH_FAILED = {"model": ErrorResponse, "description": "Report store unavailable"}
PROCESSING_FAILED = {"model": ErrorResponse, "description": "Processing error"}


def _unavailable(e: InputFetchError) -> HTTPException:
    logger.error(f"Store fetch failed: {e}")
    return HTTPException(status_code=503, detail=str(e))


@router.get(
    "/reports/unassigned-priority",
    response_model=PriorityReportPage,
    responses={503: FETCH_FAILED, 500: PROCESSING_FAILED}
)
def unassigned_priority_reports(
    type: Optional[ReportType] = Query(None, description="CRIME or FACILITY"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(
        None, alias="pageSize", ge=1, le=settings.max_page_size
    ),
):
    """
    Unassigned reports ranked by priority score.

    The whole ranking is computed per request and then sliced, so the
    order is consistent across pages.
    """
    try:
        return get_unassigned_priority_reports(
            report_type=type, page=page, page_size=page_size
        )
    except InputFetchError as e:
        raise _unavailable(e)
    except Exception as e:
        logger.error(f"Priority ranking failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Priority ranking failed: {str(e)}")


@router.get(
    "/teams/performance-metrics",
    response_model=List[TeamPerformanceMetrics],
    responses={503: FETCH_FAILED, 500: PROCESSING_FAILED}
)
def team_performance_metrics():
    """
    Performance metrics for every team, best performers first.

    Teams with no members or no cases are included with neutral scores.
    """
    try:
        return get_team_performance_metrics()
    except InputFetchError as e:
        raise _unavailable(e)
    except Exception as e:
        logger.error(f"Team metrics failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Team metrics failed: {str(e)}")


@router.get(
    "/teams/performance-metrics/summary",
    response_model=TeamPerformanceSummary,
    responses={503: FETCH_FAILED, 500: PROCESSING_FAILED}
)
def team_performance_summary():
    """Dashboard header figures and the top performing teams."""
    try:
        return get_team_performance_summary()
    except InputFetchError as e:
        raise _unavailable(e)
    except Exception as e:
        logger.error(f"Team summary failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Team summary failed: {str(e)}")


@router.get(
    "/staff/{staff_id}/workload",
    response_model=StaffWorkloadDetail,
    responses={
        404: {"model": ErrorResponse, "description": "Staff not found"},
        503: FETCH_FAILED,
        500: PROCESSING_FAILED
    }
)
def staff_workload(staff_id: int):
    """Case breakdown and availability for one staff member."""
    try:
        detail = get_staff_workload(staff_id)
        if detail is None:
            raise HTTPException(
                status_code=404, detail=f"Staff not found: {staff_id}")
        return detail
    except HTTPException:
        raise
    except InputFetchError as e:
        raise _unavailable(e)
    except Exception as e:
        logger.error(f"Staff workload failed for {staff_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Staff workload failed: {str(e)}")


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    if not database_reachable():
        return HealthResponse(status="degraded")
    return HealthResponse()
