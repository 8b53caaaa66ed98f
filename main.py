# main.py
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from connections import ConnectionHub
from lifecycle import LifecycleManager
from logging_config import get_logger
from rooms import ConnectionRegistry
from routers import rooms, signaling
from settings import Settings, settings as default_settings
from signaling import SignalingRouter

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build a relay app with its own, independent room registry."""
    settings = settings or default_settings

    app = FastAPI(title="Stream Signaling Relay", version="0.1.0")

    # CORS - any origin, with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    registry = ConnectionRegistry()
    hub = ConnectionHub()
    app.state.settings = settings
    app.state.registry = registry
    app.state.hub = hub
    app.state.router = SignalingRouter(registry, hub)
    app.state.lifecycle = LifecycleManager(registry, hub, notify_disconnect=settings.NOTIFY_DISCONNECT)

    # Healthcheck endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(signaling.router, tags=["signaling"])
    app.include_router(rooms.router, tags=["rooms"])

    logger.info(f"Relay app initialized (notify_disconnect={settings.NOTIFY_DISCONNECT})")
    return app


app = create_app()
