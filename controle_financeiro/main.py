"""FastAPI application entrypoint. No business logic; only wiring, error rendering and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from controle_financeiro.api.routes import health
from controle_financeiro.api.routes import router as api_router
from controle_financeiro.core.config import AuthConfig, Settings, settings
from controle_financeiro.core.errors import AppError, ConfigurationError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

MSG_INVALID_REQUEST = "Requisição inválida."
MSG_SERVER_ERROR = "Erro no servidor"


def load_auth_config(s: Settings) -> AuthConfig | None:
    """
    Build AuthConfig once. In prod a missing JWT_SECRET aborts startup; in dev
    the app starts but every route needing the config answers 500.
    """
    try:
        return AuthConfig.from_settings(s)
    except ConfigurationError:
        if s.APP_ENV == "prod":
            logger.critical("JWT_SECRET is not set; refusing to start in prod")
            raise
        logger.error("JWT_SECRET is not set; auth routes will fail until it is configured")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.auth_config = load_auth_config(settings)
    logger.info("Starting controle-financeiro (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="Controle Financeiro API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors as {"message": ...} with the error's status."""
    if isinstance(exc, ConfigurationError):
        logger.error("Configuration error on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": MSG_SERVER_ERROR})
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies (bad JSON, wrong types) are a 400, not FastAPI's default 422."""
    logger.info("Invalid request on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": MSG_INVALID_REQUEST},
    )


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Controle Financeiro API"}
