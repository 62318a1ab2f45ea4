"""
IFFL Companion API - Main Application

FastAPI application for the league ledger, trade history and proposals.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from iffl_companion import __version__
from iffl_companion.api.dependencies import ClientManager
from iffl_companion.api.routes import assets, interests, league, messages, proposals, trades
from iffl_companion.clients.sheets import SheetsAPIError
from iffl_companion.clients.store import DocumentStoreError
from iffl_companion.config import configure_logging, get_settings
from iffl_companion.models.proposal import InvalidTransitionError
from iffl_companion.models.user import NotAuthenticatedError
from iffl_companion.services.proposals import ProposalNotFoundError, ProposalValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info("Starting IFFL Companion API v%s", __version__)
    logger.info("Debug mode: %s, current year: %s", settings.debug, settings.current_year)

    yield

    logger.info("Shutting down IFFL Companion API")
    await ClientManager.close()


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and remote failures onto HTTP responses."""

    @app.exception_handler(SheetsAPIError)
    async def sheets_error(request: Request, exc: SheetsAPIError):
        logger.error("Spreadsheet fetch failed: %s (status %s)", exc.message, exc.status_code)
        return _error(502, exc.message)

    @app.exception_handler(DocumentStoreError)
    async def store_error(request: Request, exc: DocumentStoreError):
        logger.error("Document store failure: %s (status %s)", exc.message, exc.status_code)
        return _error(502, exc.message)

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated(request: Request, exc: NotAuthenticatedError):
        return _error(401, exc.message)

    @app.exception_handler(ProposalValidationError)
    async def invalid_proposal(request: Request, exc: ProposalValidationError):
        return _error(422, str(exc))

    @app.exception_handler(ProposalNotFoundError)
    async def proposal_not_found(request: Request, exc: ProposalNotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(request: Request, exc: InvalidTransitionError):
        return _error(409, str(exc))


def create_app() -> FastAPI:
    """Application factory to create the FastAPI app."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # The mobile and web clients call from their own origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.api_title,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "assets": "/api/assets",
                "trades": "/api/trades",
                "interests": "/api/interests",
                "proposals": "/api/proposals",
                "messages": "/api/messages",
                "league": "/api/league",
            },
        }

    # Register API routes
    app.include_router(assets.router, prefix="/api/assets", tags=["Assets"])
    app.include_router(trades.router, prefix="/api/trades", tags=["Trades"])
    app.include_router(interests.router, prefix="/api/interests", tags=["Interests"])
    app.include_router(proposals.router, prefix="/api/proposals", tags=["Proposals"])
    app.include_router(messages.router, prefix="/api/messages", tags=["Messages"])
    app.include_router(league.router, prefix="/api/league", tags=["League"])

    return app


# Create the application instance
app = create_app()


def run():
    """Run the application (used by the CLI entry point)."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "iffl_companion.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()
