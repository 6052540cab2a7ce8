"""
FastAPI application factory for the segregation simulator API.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from segnet.api.sessions import SessionManager
from segnet.api.routers import agents, metrics, network, simulation

# Load .env from the project root first, then CWD
_project_root = Path(__file__).resolve().parents[3]
load_dotenv(_project_root / ".env")
load_dotenv(Path.cwd() / ".env")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    logging.basicConfig(level=os.environ.get("SEGNET_LOG_LEVEL", "INFO").upper())

    application = FastAPI(
        title="Segnet API",
        description="REST API for the social-network segregation simulator",
        version="0.1.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.session_manager = SessionManager()

    application.include_router(simulation.router, prefix="/api/simulation", tags=["simulation"])
    application.include_router(agents.router, prefix="/api/agents", tags=["agents"])
    application.include_router(metrics.router, prefix="/api/metrics", tags=["metrics"])
    application.include_router(network.router, prefix="/api/network", tags=["network"])

    @application.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()
