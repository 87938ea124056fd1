"""
Revenue Deferral - Backend API
Term start/end dates on order line items for deferred revenue
"""
import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from revenue_deferral.core.config import settings
from revenue_deferral.core.database import check_connection
from revenue_deferral.core.logger import setup_logging
from revenue_deferral.api import hooks, orders, products, settings as settings_api
from revenue_deferral.api.dependencies import configure_membership_provider

setup_logging(settings)
configure_membership_provider(settings)

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(hooks.router, prefix="/api/v1/hooks", tags=["Hooks"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(settings_api.router, prefix="/api/v1/settings", tags=["Settings"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health():
    """Health check endpoint - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_error = None

    try:
        db_status = "connected" if check_connection() else "disconnected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "revenue-deferral-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "error": db_error
        },
        "total_latency_ms": round((time.time() - start_time) * 1000, 2)
    }


def run():
    """Start the API with uvicorn (revenue-deferral-api console script)"""
    import uvicorn

    uvicorn.run(
        "revenue_deferral.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_DEBUG
    )


if __name__ == "__main__":
    run()
