"""API routers for the REST API."""

from perforations.web.routers.export import router as export_router
from perforations.web.routers.images import router as images_router
from perforations.web.routers.perforations import router as perforations_router

__all__ = [
    "export_router",
    "images_router",
    "perforations_router",
]
