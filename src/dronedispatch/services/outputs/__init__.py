"""Output serializers."""

from .formatter import plan_result_to_json
from .geojson import plan_result_to_geojson

__all__ = ["plan_result_to_json", "plan_result_to_geojson"]
