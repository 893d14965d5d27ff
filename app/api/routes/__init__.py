from . import itineraries

__all__ = ["itineraries"]
