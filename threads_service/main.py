from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime
import uvicorn
from . import __version__
from .config import get_settings
from .core.errors import ErrorKind, ServiceError
from .routes.auth_routes import router as auth_router
from .routes.post_routes import router as post_router
from .utils.logger import get_logger

# Initialize settings and logger
settings = get_settings()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"Starting Threads Service in {settings.ENVIRONMENT} environment")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"API documentation available at: {'/docs' if settings.ENVIRONMENT != 'production' else 'Disabled'}")

    logger.debug("Threads Service Configuration:")
    logger.debug(f"Server Host: {settings.SERVER_HOST}")
    logger.debug(f"Server Port: {settings.SERVER_PORT}")
    logger.debug(f"Allowed Origins: {settings.ALLOWED_ORIGINS}")
    logger.debug(f"Upload directory: {settings.UPLOAD_DIR}")
    logger.debug(f"Upstream timeout: {settings.HTTP_TIMEOUT}s")

    creds = settings.oauth_credentials
    logger.debug("Instagram Configuration:")
    logger.debug(f"- Client ID configured: {'Yes' if creds.get('client_id') else 'No'}")
    logger.debug(f"- Callback URL: {creds.get('callback_url')}")

    yield

    logger.info("Shutting down Threads Service")

# Initialize FastAPI app
app = FastAPI(
    title="Threads Service",
    description="Instagram login and Threads publishing",
    version=__version__,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)

app.include_router(auth_router, tags=["auth"])
app.include_router(post_router, tags=["threads"])

@app.get("/")
async def root():
    """Root endpoint to verify service is running."""
    return {
        "message": "Threads Service is running",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat()
    }

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
        "debug_mode": settings.DEBUG
    }

# Error handlers
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Render protocol and admission failures."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind.value}")
    else:
        logger.debug(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message}
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as bad requests."""
    logger.debug(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=ErrorKind.BAD_REQUEST.status_code,
        content={"message": ErrorKind.BAD_REQUEST.message}
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(f"Unhandled error occurred: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"}
    )

# Run the application
if __name__ == "__main__":
    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["access"]["fmt"] = settings.LOG_FORMAT

    logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "threads_service.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "development",
        workers=1 if settings.ENVIRONMENT == "development" else settings.WORKERS,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=log_config
    )
