import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fintrack.core.config import settings
from fintrack.core.errors import FinanceTrackerError, InternalError, NotFoundError, ValidationError
from fintrack.db.memory import MemoryStore
from fintrack.routers import ai, analytics, assets, budgets, data, health, transactions
from fintrack.routers import settings as settings_router
from fintrack.utils.ai_assistant import AIFinancialAssistant
from fintrack.utils.analyzer import FinanceAnalyzer

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} (AI assistant enabled: {app.state.assistant.enabled})")
    yield
    logger.info("Shutting down, closing AI client...")
    await app.state.assistant.close()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})

    @app.exception_handler(FinanceTrackerError)
    async def finance_error_handler(request: Request, exc: FinanceTrackerError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": InternalError.message},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": InternalError.message},
        )


def create_app(
    store: Optional[MemoryStore] = None,
    assistant: Optional[AIFinancialAssistant] = None,
    analyzer: Optional[FinanceAnalyzer] = None,
) -> FastAPI:
    store = store or MemoryStore()
    analyzer = analyzer or FinanceAnalyzer(store.currencies)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.analyzer = analyzer
    app.state.assistant = assistant or AIFinancialAssistant(analyzer=analyzer)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Root endpoint
    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    # Register routers
    app.include_router(health.router, prefix=f"{settings.API_PREFIX}", tags=["Health"])  # /api/health
    app.include_router(transactions.router, prefix=f"{settings.API_PREFIX}/transactions", tags=["Transactions"])
    app.include_router(budgets.router, prefix=f"{settings.API_PREFIX}/budgets", tags=["Budgets"])
    app.include_router(assets.router, prefix=f"{settings.API_PREFIX}/assets", tags=["Assets"])
    app.include_router(settings_router.router, prefix=f"{settings.API_PREFIX}/settings", tags=["Settings"])
    app.include_router(analytics.router, prefix=f"{settings.API_PREFIX}/analytics", tags=["Analytics"])
    app.include_router(ai.router, prefix=f"{settings.API_PREFIX}/ai", tags=["AI"])
    app.include_router(data.router, prefix=f"{settings.API_PREFIX}", tags=["Data"])  # /api/export, /api/clear-data

    return app


app = create_app()
