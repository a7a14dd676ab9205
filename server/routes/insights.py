"""Insight API routes - AI commentary on the current standings."""

from fastapi import APIRouter, Depends

from analysis.llm.insights import InsightRequester
from election.store import CandidateStore
from server.dependencies import get_insights, get_store
from server.utils.responses import success_response

router = APIRouter(prefix="/api")


@router.post("/insights")
async def request_insights(
    store: CandidateStore = Depends(get_store),
    insights: InsightRequester = Depends(get_insights),
):
    """Send aggregate counts to Gemini and return its report

    Failures come back as fallback text with success=True; only an
    overlapping request is rejected (409).
    """
    report = await insights.request_insights(store.candidates)
    return success_response({"report": report, "model": insights.model})
