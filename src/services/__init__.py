"""Services layer"""

from .activity_service import ActivityService
from .movie_service import MovieService, bake_frames
from .service_container import ServiceContainer

__all__ = [
    "ActivityService",
    "MovieService",
    "bake_frames",
    "ServiceContainer",
]
