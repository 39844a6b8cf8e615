from . import trips
from . import vault
from . import itinerary
from . import files
from . import activity_types

__all__ = [
    "trips",
    "vault",
    "itinerary",
    "files",
    "activity_types",
]
