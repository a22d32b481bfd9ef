from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from datetime import datetime
import time
from sqlalchemy import select

from app.core.config import settings
from app.core.database import init_db, close_db, get_session_local
from app.core.exceptions import SAPTechError
from app.core.logging_config import logger
from app.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.core.security import get_password_hash
from app.api.v1.router import api_router
from slowapi.errors import RateLimitExceeded
from app.models import User, UserRole


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.SECRET_KEY or settings.SECRET_KEY == "CHANGE_ME":
        errors.append("SECRET_KEY is not set or using default value")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if bool(settings.ADMIN_EMAIL) != bool(settings.ADMIN_PASSWORD):
        warnings.append("Only one of ADMIN_EMAIL / ADMIN_PASSWORD is set - admin bootstrap skipped")

    if not settings.RATE_LIMIT_ENABLED:
        warnings.append("Rate limiting is disabled")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


async def ensure_admin_user():
    """Create the bootstrap admin from ADMIN_EMAIL / ADMIN_PASSWORD if missing"""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return None

    email = settings.ADMIN_EMAIL.strip().lower()
    async with get_session_local()() as session:
        existing = await session.scalar(select(User).where(User.email == email))
        if existing:
            if existing.role != UserRole.ADMIN:
                existing.role = UserRole.ADMIN
                await session.commit()
                logger.info(f"[Startup] Promoted {email} to admin")
            return existing

        admin = User(
            name=settings.ADMIN_NAME,
            email=email,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            is_active=True,
        )
        session.add(admin)
        await session.commit()
        logger.info(f"[Startup] Created admin account {email}")
        return admin


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME} API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    # Step 1: Validate critical configuration (fail fast!)
    await validate_critical_config()

    # Step 2: Create tables
    await init_db()

    # Step 3: Bootstrap admin account
    await ensure_admin_user()

    app.state.started_at = time.time()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME} API...")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Business website, product catalog, awards and certificates platform",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False  # Prevent 307 redirects that break CORS
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.state.started_at = time.time()
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
# 1. Request logging
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. Request size limit
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)

# 4. CORS - Origins from CORS_ORIGINS_STR in .env
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(SAPTechError)
async def saptech_exception_handler(request: Request, exc: SAPTechError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, "request", path=request.url.path)
    else:
        logger.info(f"[{exc.code}] {exc.message}", extra={"http_path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
    }


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to the {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# Uploaded files (images, logos, certificates)
app.mount("/uploads", StaticFiles(directory=str(settings.UPLOAD_DIR)), name="uploads")

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


def run():
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    run()
