"""Text analytics endpoints for the dashboard and the programmatic API."""
from fastapi import APIRouter, Depends

from textgate.api.deps import get_analysis_service, get_current_user_id
from textgate.schemas.analysis import (
    KeywordRequest,
    KeywordResponse,
    SentimentRequest,
    SentimentResponse,
    SummaryRequest,
    SummaryResponse,
)
from textgate.services.analysis_service import AnalysisService
from textgate.types import AccessChannel


def build_router(prefix: str, channel: AccessChannel, tag: str) -> APIRouter:
    """Build the analysis routes for one access channel."""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.post("/keywords", response_model=KeywordResponse)
    async def extract_keywords(
        request: KeywordRequest,
        user_id: str = Depends(get_current_user_id),
        service: AnalysisService = Depends(get_analysis_service),
    ) -> KeywordResponse:
        """
        Extract the most frequent keywords.

        - **text**: Text to analyze (required)
        - **max_keywords**: Number of keywords to return (default 10)

        Requires keyword extraction on the caller's plan.
        """
        keywords = await service.extract_keywords(user_id, request.text, request.max_keywords, channel)
        return KeywordResponse(keywords=keywords)

    @router.post("/sentiment", response_model=SentimentResponse)
    async def analyze_sentiment(
        request: SentimentRequest,
        user_id: str = Depends(get_current_user_id),
        service: AnalysisService = Depends(get_analysis_service),
    ) -> SentimentResponse:
        """
        Score text polarity.

        Returns a label (positive, negative or neutral) and a score in [-1, 1].
        Requires sentiment analysis on the caller's plan.
        """
        result = await service.analyze_sentiment(user_id, request.text, channel)
        return SentimentResponse(label=result.label, score=result.score)

    @router.post("/summarize", response_model=SummaryResponse)
    async def summarize(
        request: SummaryRequest,
        user_id: str = Depends(get_current_user_id),
        service: AnalysisService = Depends(get_analysis_service),
    ) -> SummaryResponse:
        """
        Summarize text by extracting its highest-scoring sentences.

        - **max_length**, **type**, **language** are validated but the summary is always extractive.

        Requires text summarization on the caller's plan.
        """
        summary = await service.summarize(user_id, request.text, channel)
        return SummaryResponse(summary=summary)

    return router


dashboard_router = build_router("/analysis", AccessChannel.DASHBOARD, "Analysis")
api_router = build_router("/api", AccessChannel.API, "Programmatic API")
