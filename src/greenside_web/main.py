"""GREENSIDE - golf course map editor.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from greenside.draw.scheduler import LoopScheduler
from greenside.editor import MapEditor
from greenside.geo.geolocation import HttpPositionSource, NullPositionSource
from greenside.layers.store import FeatureStore
from greenside.render.engine import InMemoryMapEngine
from greenside_web.config import Settings, settings
from greenside_web.routers import editor_router


def create_editor(config: Settings) -> MapEditor:
    """Build the process-wide editor from settings."""
    store = FeatureStore(path=config.data_path or None)
    if config.geolocation_url:
        position_source = HttpPositionSource(config.geolocation_url)
        logger.info(f"Geolocation: GPS relay at {config.geolocation_url}")
    else:
        position_source = NullPositionSource()
        logger.info("Geolocation: no device configured, sprinklers use the viewport center")

    return MapEditor(
        readonly=config.readonly,
        store=store,
        map_engine=InMemoryMapEngine(
            center=(config.map_center_lng, config.map_center_lat),
            zoom=config.map_zoom,
        ),
        scheduler=LoopScheduler(),
        position_source=position_source,
        settle_delay=config.settle_delay,
        basemap=config.map_style,
        geolocation_timeout=config.geolocation_timeout,
        geolocation_high_accuracy=config.geolocation_high_accuracy,
        geolocation_maximum_age=config.geolocation_maximum_age,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info("  GREENSIDE v0.1.0 - INITIALIZING")
    logger.info("=" * 60)

    editor = create_editor(settings)
    editor.on_style_load()
    editor.on_idle()
    app.state.editor = editor

    if settings.data_path:
        logger.info(f"Map data: {settings.data_path}")
    else:
        logger.warning("Map data: in memory only (set DATA_PATH to persist)")

    yield

    if editor.controller.editing:
        logger.warning("Shutting down with an unsaved edit session; edits discarded")
        editor.cancel_edit()
    logger.info("GREENSIDE shutting down...")


# Create FastAPI app
app = FastAPI(
    title="GREENSIDE",
    description="Golf course map editor",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(editor_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": "0.1.0",
        "system": "GREENSIDE",
    }


def run() -> None:
    import uvicorn

    uvicorn.run(
        "greenside_web.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
