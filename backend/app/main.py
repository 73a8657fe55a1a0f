import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from app.core.config import settings
from app.core.database import engine, Base
from app.core.errors import AppError, StorageError
from app.core.limiter import limiter
from app.api.routes import auth, premium, swipe

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: create tables that don't exist yet
    """
    # In production, use migrations (Alembic) instead of create_all
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Dating API",
    description="Registration, daily-limited swipes and premium upgrades",
    version="1.0.0",
    lifespan=lifespan
)

# slowapi looks the limiter up on app.state
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, StorageError):
        # Details were logged where the failure happened
        logger.error(f"Storage failure on {request.method} {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "success": False,
            "code": "RATE_LIMITED",
            "message": "Too many attempts, please try again later",
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        # loc looks like ("body", "email"); report the innermost field name
        fields = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({
            "field": fields[-1] if fields else "body",
            "msg": error.get("msg"),
            "type": error.get("type"),
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "code": "VALIDATION_ERROR", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "code": "INTERNAL_ERROR", "message": "Internal server error"},
    )


# All routes are prefixed with /api
app.include_router(auth.router, prefix="/api")
app.include_router(swipe.router, prefix="/api")
app.include_router(premium.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {"message": "Dating API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {"status": "healthy"}
