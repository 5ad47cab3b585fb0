"""API routers."""

from greenside_web.routers.editor import router as editor_router

__all__ = ["editor_router"]
