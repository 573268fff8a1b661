"""
GarmentFlow - Main FastAPI Application.

REST API for the garment order ledger: placement with stock
reservation, the approval lifecycle and shipment tracking.
"""
from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import reset_dependencies
from api.routes import health, orders, products, users
from core.domain.errors import CommerceError
from core.infrastructure.database.config import close_database, init_database
from core.settings import get_app_settings


settings = get_app_settings()

# Setup logging
logging.basicConfig(
    level=settings.api.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, dispose the engine on shutdown."""
    logger.info("🚀 GarmentFlow API starting up...")
    await init_database()
    logger.info("📚 Swagger UI available at: /docs")
    yield
    logger.info("👋 GarmentFlow API shutting down...")
    await close_database()
    reset_dependencies()


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title=settings.api.title,
    description="""
    Order ledger for a garment production marketplace.

    Features:
    - Order placement with oversell-proof stock reservation
    - Approve / reject / cancel lifecycle with append-only history
    - Shipment tracking timeline
    - Product and user directories
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

ERROR_STATUS_CODES = {
    "Unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "RoleNotPermitted": status.HTTP_403_FORBIDDEN,
    "ProductNotFound": status.HTTP_404_NOT_FOUND,
    "OrderNotFound": status.HTTP_404_NOT_FOUND,
    "UserNotFound": status.HTTP_404_NOT_FOUND,
    "InsufficientStock": status.HTTP_409_CONFLICT,
    "InvalidStateTransition": status.HTTP_409_CONFLICT,
    "UserAlreadyExists": status.HTTP_409_CONFLICT,
    "BelowMinimumOrderQuantity": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "StorageUnavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "ReservationRollbackFailed": status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(CommerceError)
async def commerce_error_handler(request: Request, exc: CommerceError):
    """Map typed core errors to HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    if status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Domain validation failures (e.g. blank shipping fields)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "ValidationError", "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(
    health.router,
    tags=["Health"]
)

app.include_router(
    orders.router,
    prefix="/api/v1/orders",
    tags=["Orders"]
)

app.include_router(
    products.router,
    prefix="/api/v1/products",
    tags=["Products"]
)

app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users"]
)


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "GarmentFlow - Order Ledger API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
