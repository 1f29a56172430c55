"""Route group exports."""

from . import delivery, drones, geometry, health

__all__ = ["geometry", "drones", "delivery", "health"]
