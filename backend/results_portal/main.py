import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum

from results_portal.config.settings import Settings, get_settings, settings as default_settings
from results_portal.exceptions import ResultsPortalError
from results_portal.health import router as health_router
from results_portal.results import router as results_router

# Configure logging for Lambda
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)

# Force the root logger to INFO level explicitly
logging.getLogger().setLevel(logging.INFO)

# Prevent duplicate logs from uvicorn when running locally
if default_settings.APP_ENV != 'development':
    logging.getLogger("uvicorn.access").propagate = False
    logging.getLogger("uvicorn.error").propagate = False

logger = logging.getLogger(__name__)


def build_allowed_origins(settings: Settings):
    if settings.ALLOW_ALL_ORIGINS:
        return ["*"]

    allowed_origins = [
        "http://localhost:3000", # Common port for local React dev
        "http://localhost:5173", # Common port for local Vite dev
    ]

    frontend_url = settings.FRONTEND_URL
    if frontend_url:
        allowed_origins.append(frontend_url)
        # Also add without trailing slash if it exists
        if frontend_url.endswith("/"):
            allowed_origins.append(frontend_url.rstrip("/"))

    return allowed_origins


async def results_portal_error_handler(request: Request, exc: ResultsPortalError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application."""
    overridden = settings is not None
    settings = settings or default_settings
    logger.info(f"Creating FastAPI app - Environment: {settings.APP_ENV}")

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url=settings.API_DOCS_URL,
        redoc_url=settings.API_REDOC_URL,
        openapi_url=settings.API_OPENAPI_URL
    )

    allowed_origins = build_allowed_origins(settings)
    logger.info(f"CORS allowed origins: {allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ResultsPortalError, results_portal_error_handler)

    if overridden:
        app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(health_router.router)
    app.include_router(results_router.router)

    logger.info("FastAPI app created successfully")
    return app

_fastapi_app = create_app()

# Conditionally wrap with Mangum for serverless deployment
if default_settings.APP_ENV != 'development':
    logger.info("Wrapping FastAPI app with Mangum for Lambda")
    app = Mangum(_fastapi_app)
else:
    app = _fastapi_app # Use the raw FastAPI app for local dev

# For local development
if __name__ == '__main__':
    import uvicorn

    port = default_settings.PORT
    print(f"Starting FastAPI server on port {port}...")
    print(f"Environment: {default_settings.APP_ENV}")
    print(f"API Documentation: http://localhost:{port}{default_settings.API_DOCS_URL}")

    uvicorn.run(_fastapi_app,
                host="0.0.0.0",
                port=port,
                log_level="info",
                access_log=False)
