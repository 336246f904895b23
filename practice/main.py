"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from practice.config import settings
from practice.data import routes as data_routes
from practice.reports import routes as report_routes
from practice.assistant import routes as assistant_routes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Practice API",
    description="Therapy practice management - clients, goals, sessions and NDIS budgets",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(data_routes.router, prefix=settings.API_V1_PREFIX)
app.include_router(report_routes.router, prefix=f"{settings.API_V1_PREFIX}/reports", tags=["Reports"])
app.include_router(assistant_routes.router, prefix=f"{settings.API_V1_PREFIX}/assistant", tags=["Assistant"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Practice API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "practice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
