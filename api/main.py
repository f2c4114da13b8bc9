"""
TokenPulse - REST API

FastAPI application serving AI token analysis.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tokenpulse import __version__
from tokenpulse.config import settings
from tokenpulse.errors import TokenPulseError
from tokenpulse.logging import get_api_logger, setup_logging
from tokenpulse.models import (
    AnalysisRequest,
    AnalysisResponse,
    ErrorResponse,
    HealthStatus,
)

from agents.orchestrator import AnalysisOrchestrator

logger = get_api_logger()


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    logger.info("starting_tokenpulse_api", version=__version__)

    app.state.orchestrator = AnalysisOrchestrator()
    if not app.state.orchestrator.is_configured:
        logger.warning("llm_api_key_missing")

    yield

    logger.info("shutting_down_api")


# =============================================================================
# App Configuration
# =============================================================================

app = FastAPI(
    title="TokenPulse API",
    description="AI analysis of live token market data",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependency Injection
# =============================================================================

def get_orchestrator() -> AnalysisOrchestrator:
    orchestrator = getattr(app.state, "orchestrator", None)
    if orchestrator is None:
        orchestrator = app.state.orchestrator = AnalysisOrchestrator()
    return orchestrator


# =============================================================================
# Health Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """API root endpoint."""
    return {"name": "TokenPulse API", "version": __version__}


@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check(
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """
    Check API health and whether the model provider is configured.
    """
    return HealthStatus(
        status="healthy" if orchestrator.is_configured else "degraded",
        version=__version__,
        timestamp=datetime.utcnow(),
        services={"llm": orchestrator.is_configured},
    )


# =============================================================================
# Analysis Endpoint
# =============================================================================

@app.post(
    "/api/ai-analysis",
    response_model=AnalysisResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    tags=["Analysis"],
)
async def ai_analysis(
    body: AnalysisRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """
    Analyze a token with live DexScreener data and an LLM.

    - **tokenIdentifier**: Token contract address
    - **userPrompt**: Optional question; a default analysis prompt is used otherwise
    """
    result = await orchestrator.analyze(body.token_address, body.prompt)
    return AnalysisResponse.from_result(result)


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(TokenPulseError)
async def tokenpulse_error_handler(request: Request, exc: TokenPulseError):
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "analysis_request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("invalid_request_body", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request body").model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="An unexpected error occurred").model_dump(),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
        workers=1 if settings.api.reload else settings.api.workers,
    )
