"""Schema package exports."""

from .itinerary import TIME_SLOTS, Activity, Day, Itinerary, dump_itinerary, validate_itinerary

__all__ = ["TIME_SLOTS", "Activity", "Day", "Itinerary", "dump_itinerary", "validate_itinerary"]
