from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
import logging
import uuid

from . import __version__
from .config import settings
from .database import create_tables, run_migrations, SessionLocal
from .models.user import User, UserRole
from .services.errors import TickMyPaxError
from .utils.logging_config import setup_logging, set_request_context, clear_request_context
from .utils.rate_limiter import limiter
from .utils.security import hash_password

from .routers import auth, records, tours

logger = logging.getLogger("tickmypax")


def seed_admin():
    """Create the configured admin account if it does not exist yet"""
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == settings.admin_email).first()
        if admin:
            logger.info("Admin account %s already exists", settings.admin_email)
            return
        db.add(User(
            email=settings.admin_email,
            user_name=settings.admin_email,
            hashed_password=hash_password(settings.admin_password),
            role=UserRole.ADMIN.value,
            is_active=True,
        ))
        db.commit()
        logger.info("Created admin account %s", settings.admin_email)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(level=settings.log_level, json_format=settings.log_json or settings.is_production)

    logger.info("Starting tickmypax (environment=%s)", settings.environment)
    logger.info("CORS origins: %s", settings.cors_origins)

    create_tables()
    run_migrations()
    seed_admin()

    logger.info("Database ready")
    yield
    logger.info("Shutting down tickmypax")


app = FastAPI(
    title="TickMyPax API",
    description="Passenger import, check-in and guide reporting for tour operations",
    version=__version__,
    lifespan=lifespan
)

# Rate limiter state
app.state.limiter = limiter


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response


# Add other middleware AFTER CORS
app.add_middleware(RequestIdMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many attempts, try again later"}
    )


@app.exception_handler(TickMyPaxError)
async def service_error_handler(request: Request, exc: TickMyPaxError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth.router)
app.include_router(records.router)
app.include_router(tours.router)


@app.get("/")
async def root():
    return {
        "message": "TickMyPax API",
        "version": __version__,
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
@app.get("/health/")
async def health_check():
    return {"status": "healthy"}
