"""
Health check application served while the bot is running
"""
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import Response

from .. import __version__
from .api.v1 import api_router
from .api.v1.routes.health import health_check
from .core.config import settings
from .core.exceptions import general_exception_handler


def create_app() -> FastAPI:
    """Build the FastAPI app exposing / and /health"""
    app = FastAPI(
        title="Crypto Prediction Bot",
        version=__version__,
        description=f"Daily crypto prediction bot running in {settings.environment} environment"
    )
    app.state.settings = settings
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router)

    # Hosting platforms probe /health at the root
    app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])

    @app.head("/health")
    async def health_check_head():
        return Response(status_code=200)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Crypto Prediction Bot is running",
            "status": "active",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.head("/")
    async def root_head():
        return Response(status_code=200)

    return app


app = create_app()
