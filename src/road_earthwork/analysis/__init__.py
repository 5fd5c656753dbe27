"""Analysis modules for the road template design."""

from .formation import FormationGeometry, SideSlope, RoadTemplate, formation_width_from_lanes

__all__ = ["FormationGeometry", "SideSlope", "RoadTemplate", "formation_width_from_lanes"]
