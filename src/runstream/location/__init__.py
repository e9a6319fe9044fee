from .resolver import LocationResolver
from .search import SourceSearcher

__all__ = [
    "LocationResolver",
    "SourceSearcher",
]
