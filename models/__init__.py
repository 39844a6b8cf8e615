from .Trip import Trip
from .VaultItem import VaultItem
from .ItineraryItem import ItineraryItem

__all__ = ["Trip", "VaultItem", "ItineraryItem"]
