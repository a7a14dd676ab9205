"""
ballotbox API Server

FastAPI application wiring the election components together.
Components are built once in the lifespan and shared through app.state;
routes reach them via server.dependencies.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from analysis.llm.insights import InsightRequester
from config import config, get_logger
from database.state_storage import SQLiteStateStorage
from election.roster import RosterAdmin
from election.session import BallotSessionRegistry
from election.simulation import TrafficSimulator
from election.store import CandidateStore
from exceptions import BallotError
from server.metrics import metrics
from server.middleware.logging import log_requests
from server.middleware.metrics import metrics_middleware
from server.middleware.request_id import RequestContextMiddleware, get_request_id
from server.routes import admin, ballot, dashboard, insights, monitoring
from server.utils.responses import (
    ballot_error_response,
    request_validation_response,
    status_for,
)

logger = get_logger(__name__)


def create_app(
    state_db_path: Optional[str] = None,
    insight_requester: Optional[InsightRequester] = None,
) -> FastAPI:
    """Build the API application

    Args:
        state_db_path: SQLite state file (defaults to BALLOT_STATE_DB)
        insight_requester: Pre-built requester (defaults to one from config)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load persisted state and build the shared components"""
        if state_db_path is None:
            config.ensure_data_dir()
        storage = SQLiteStateStorage(state_db_path or config.STATE_DB_PATH)

        store = CandidateStore(storage)
        sessions = BallotSessionRegistry(store)
        app.state.store = store
        app.state.sessions = sessions
        app.state.roster = RosterAdmin(store, sessions)
        app.state.insights = insight_requester or InsightRequester()
        app.state.simulator = TrafficSimulator(store)

        logger.info(
            "ballot service ready",
            candidates=len(store),
            ballots_submitted=store.ballots_submitted,
            db_path=storage.db_path,
        )

        yield

        await app.state.simulator.stop()
        logger.info("ballot service stopped")

    app = FastAPI(title="ballotbox API", description="Association election ballot", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    # Must be early in stack for tracing
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(BallotError)
    async def handle_ballot_error(request: Request, exc: BallotError):
        status_code = status_for(exc)
        if status_code >= 500:
            metrics.record_error(component="api", error=exc)
            logger.error("request failed", path=request.url.path, error=str(exc))
        else:
            logger.info(
                "request rejected",
                path=request.url.path,
                error_type=type(exc).__name__,
                status_code=status_code,
            )
        return ballot_error_response(exc, request_id=get_request_id(request))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.info(
            "request rejected",
            path=request.url.path,
            error_type="RequestValidationError",
            status_code=400,
        )
        return request_validation_response(exc.errors(), request_id=get_request_id(request))

    # FastAPI middleware stack: last registered runs first
    @app.middleware("http")
    async def log_requests_middleware(request, call_next):
        return await log_requests(request, call_next)

    @app.middleware("http")
    async def metrics_middleware_wrapper(request, call_next):
        return await metrics_middleware(request, call_next)

    app.include_router(monitoring.router)  # Root, health and metrics
    app.include_router(ballot.router)      # Roster browsing and voting
    app.include_router(dashboard.router)   # Live tallies
    app.include_router(insights.router)    # AI commentary
    app.include_router(admin.router)       # Roster admin, reset, simulation

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    if not config.get_api_key():
        logger.warning("No Gemini API key configured. Insights will return fallback text.")
        logger.warning("Set GEMINI_API_KEY or LLM_API_KEY to enable AI commentary.")

    logger.info("starting ballotbox API server", config_summary=config.summary())

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        access_log=False,  # Request logging middleware covers this
    )
