"""Usage metering and reporting endpoints."""
from fastapi import APIRouter, Depends

from textgate.api.deps import get_analysis_service, get_current_user_id
from textgate.schemas.usage_record import ContentGenerationReceipt, UsageRecordList, UsageSummary
from textgate.services.analysis_service import AnalysisService

router = APIRouter(prefix="/usage", tags=["Usage"])


@router.post("/content-generation", response_model=ContentGenerationReceipt)
async def record_content_generation(
    user_id: str = Depends(get_current_user_id),
    service: AnalysisService = Depends(get_analysis_service),
) -> ContentGenerationReceipt:
    """
    Meter one content generation against the monthly quota.

    Answers 429 once the plan's monthly limit is reached.
    """
    return await service.record_content_generation(user_id)


@router.get("/current", response_model=UsageSummary)
async def get_current_usage(
    user_id: str = Depends(get_current_user_id),
    service: AnalysisService = Depends(get_analysis_service),
) -> UsageSummary:
    """Current period counters, plan limits and remaining content quota."""
    return await service.current_usage_summary(user_id)


@router.get("/history", response_model=UsageRecordList)
async def get_usage_history(
    user_id: str = Depends(get_current_user_id),
    service: AnalysisService = Depends(get_analysis_service),
) -> UsageRecordList:
    """Every recorded period for the caller, newest first."""
    return await service.history(user_id)
