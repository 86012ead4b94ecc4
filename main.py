"""
Puzzle Rewards FastAPI Backend
Brand-funded puzzle campaigns with daily prize pools and weekly payouts
"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import redis

from config import settings
from database import DatabaseManager
from app.routes import campaigns, payments, prize_pool, payouts, leaderboard

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

redis_client = redis.Redis.from_url(
    settings.REDIS_URL,
    decode_responses=True,
    socket_connect_timeout=5
) if settings.REDIS_ENABLED else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"{settings.APP_NAME} backend starting")

    try:
        DatabaseManager.check_connection()
        logger.info("Database connection established")
        if settings.DATABASE_URL.startswith("sqlite"):
            DatabaseManager.create_all_tables()
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    if redis_client is not None:
        try:
            redis_client.ping()
            logger.info("Redis connection established")
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed (task queue unavailable): {e}")

    yield

    # Shutdown
    logger.info(f"{settings.APP_NAME} backend shutting down")


# Create FastAPI app
app = FastAPI(
    title="Puzzle Rewards API",
    description="Puzzle ad campaigns for brands, with daily prize pools and weekly cash payouts for players",
    version=settings.APP_VERSION,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["*"],
)


# Performance monitoring middleware
@app.middleware("http")
async def performance_middleware(request: Request, call_next):
    """Monitor API performance"""
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log requests taking more than 1 second
    if process_time > 1.0:
        logger.warning(f"Slow request {request.method} {request.url.path} took {process_time:.2f}s")

    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """System health check"""
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "services": {}
    }

    # Check Redis
    if redis_client is None:
        health_status["services"]["redis"] = "disabled"
    else:
        try:
            redis_client.ping()
            health_status["services"]["redis"] = "healthy"
        except redis.RedisError:
            health_status["services"]["redis"] = "unhealthy"
            health_status["status"] = "degraded"

    # Check Database
    try:
        DatabaseManager.check_connection()
        health_status["services"]["database"] = "healthy"
    except Exception:
        logger.exception("Database health check failed")
        health_status["services"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    return health_status


# Root endpoint
@app.get("/")
async def root():
    """Welcome message and API information"""
    return {
        "message": "Welcome to Puzzle Rewards API",
        "status": "running",
        "version": settings.APP_VERSION,
        "documentation": "/api/docs",
        "health_check": "/health"
    }

# Include routers
app.include_router(campaigns.router, prefix="/api/campaigns", tags=["Campaigns"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(prize_pool.router, prefix="/api/prize-pool", tags=["Prize Pool"])
app.include_router(payouts.router, prefix="/api/payouts", tags=["Payouts"])
app.include_router(leaderboard.router, prefix="/api/leaderboard", tags=["Leaderboard"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG,
        access_log=settings.DEBUG
    )
