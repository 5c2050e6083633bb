"""
Business services for UniPlace.

High-level entry points that orchestrate the core engine and storage.
"""

from uniplace.services.placement_service import PlacementService, get_placement_service

__all__ = [
    "PlacementService",
    "get_placement_service",
]
