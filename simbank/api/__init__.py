"""
SimBank API Application Factory
"""

from fastapi import FastAPI
import uvicorn

from .. import __version__
from .session import router as session_router
from .transactions import router as transactions_router
from .loans import router as loans_router
from .market import router as market_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="SimBank API",
        description="Single-user banking simulation with snapshot persistence",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Include routers
    app.include_router(session_router, prefix="/session", tags=["Session"])
    app.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])
    app.include_router(loans_router, prefix="/loans", tags=["Loans"])
    app.include_router(market_router, tags=["Market"])

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "simbank_api",
            "version": __version__
        }

    # Root endpoint
    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "SimBank API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "session": "/session",
                "transactions": "/transactions",
                "loans": "/loans",
                "market": "/market",
                "status": "/status",
            }
        }

    return app


def run_server(host: str, port: int) -> None:
    """Serve the API with uvicorn"""
    uvicorn.run(create_app(), host=host, port=port, access_log=False)
