"""
Monitoring and health check API routes
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from analysis.llm.insights import InsightRequester
from config import config, get_logger
from election.session import BallotSessionRegistry
from election.simulation import TrafficSimulator
from election.store import CandidateStore
from server.dependencies import get_insights, get_sessions, get_simulator, get_store
from server.metrics import get_metrics_text

logger = get_logger(__name__)

VERSION = "1.0.0"

router = APIRouter()


@router.get("/")
async def root():
    """API status and info"""
    return {
        "service": "ballotbox API",
        "status": "running",
        "version": VERSION,
        "description": "Association election ballot, live tallies and roster admin",
        "endpoints": {
            "offices": "GET /api/offices - The five positions on the ballot",
            "candidates": "GET /api/candidates - Candidate roster (optional ?office=)",
            "ballot": {
                "view": "GET /api/ballot - Current voter's ballot",
                "select": "PUT /api/ballot/selections/{office} - Choose a candidate id or 'abstain'",
                "clear": "DELETE /api/ballot/selections - Clear all selections",
                "submit": "POST /api/ballot/submit - Request submission (needs confirmation)",
                "confirm": "POST /api/ballot/confirm - Confirm and cast the ballot",
                "cancel": "POST /api/ballot/cancel - Go back and review",
            },
            "dashboard": "GET /api/dashboard - Live tallies",
            "insights": "POST /api/insights - AI commentary on current results",
            "admin": {
                "add_candidate": "POST /api/admin/candidates",
                "rename_candidate": "PATCH /api/admin/candidates/{id}",
                "remove_candidate": "DELETE /api/admin/candidates/{id}?confirm=true",
                "reset": "POST /api/admin/reset",
                "simulation": "GET|POST /api/admin/simulation",
            },
            "health": "GET /api/health - Health check",
            "metrics": "GET /metrics - Prometheus metrics",
        },
        "voter_session_header": "X-Voter-Session",
    }


@router.get("/api/health")
async def health_check(
    store: CandidateStore = Depends(get_store),
    sessions: BallotSessionRegistry = Depends(get_sessions),
    insights: InsightRequester = Depends(get_insights),
    simulator: TrafficSimulator = Depends(get_simulator),
):
    """Health check endpoint"""
    health_status: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": VERSION,
        "checks": {},
    }

    try:
        health_status["checks"]["storage"] = {
            "status": "healthy",
            "candidates": len(store),
            "ballots_submitted": store.ballots_submitted,
            "live_sessions": len(sessions),
        }
    except Exception as e:
        logger.error("storage health check failed", error=str(e))
        health_status["checks"]["storage"] = {"status": "unhealthy", "error": str(e)}
        health_status["status"] = "unhealthy"

    health_status["checks"]["insights"] = {
        "status": "available" if insights.api_key else "disabled",
        "has_api_key": bool(insights.api_key),
        "model": insights.model,
        "busy": insights.is_busy,
    }

    health_status["checks"]["simulation"] = simulator.status()

    health_status["checks"]["configuration"] = {
        "status": "healthy",
        "summary": config.summary(),
    }

    return health_status


@router.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(content=get_metrics_text(), media_type="text/plain")
