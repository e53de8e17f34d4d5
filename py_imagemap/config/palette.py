"""
Color palette for matching analyzed colors to named terrain types.

A palette is an ordered list of mappings, each with a target color and a
tolerance measured with the perceptual (CIELAB) distance. Earlier mappings
win ties.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.color_space import Color, perceptual_distance


class ColorMapping(BaseModel):
    """One named target color."""

    name: str = Field(default="New Mapping", description="Display name, e.g. Grass or Water")
    target_color: Color = Field(default=Color(1.0, 1.0, 1.0), description="Color to match")
    tolerance: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Allowed perceptual distance (0 = exact, 1 = any color)",
    )
    y_offset: float = Field(default=0.0, description="Vertical offset for layer stacking")

    @field_validator("target_color")
    @classmethod
    def channels_in_range(cls, value: Color) -> Color:
        if any(c < 0.0 or c > 1.0 for c in value):
            raise ValueError("color channels must lie in [0, 1]")
        return value

    def distance_to(self, color) -> float:
        return perceptual_distance(self.target_color, color)

    def is_within_tolerance(self, color) -> bool:
        return self.distance_to(color) <= self.tolerance


class ColorPalette(BaseModel):
    """Ordered set of color mappings."""

    mappings: List[ColorMapping] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "ColorPalette":
        """Suggested starting palette."""
        return cls(
            mappings=[
                ColorMapping(name="Grass", target_color=Color.from_rgb255(0, 128, 0)),
                ColorMapping(name="Water", target_color=Color.from_rgb255(0, 0, 255)),
                ColorMapping(name="Dirt", target_color=Color.from_rgb255(139, 69, 19)),
                ColorMapping(name="Stone", target_color=Color.from_rgb255(128, 128, 128)),
                ColorMapping(name="Snow", target_color=Color.from_rgb255(255, 255, 255)),
                ColorMapping(name="Void", target_color=Color.from_rgb255(0, 0, 0)),
            ]
        )

    @classmethod
    def from_clusters(cls, clusters: Iterable, tolerance: float = 0.2) -> "ColorPalette":
        """One mapping per analyzed cluster, named after the cluster label."""
        return cls(
            mappings=[
                ColorMapping(name=c.label, target_color=c.centroid, tolerance=tolerance)
                for c in clusters
            ]
        )

    def find_best_match(self, color) -> Optional[ColorMapping]:
        """Closest mapping that accepts the color, or None."""
        best_match = None
        best_distance = float("inf")

        for mapping in self.mappings:
            distance = mapping.distance_to(color)
            if distance <= mapping.tolerance and distance < best_distance:
                best_distance = distance
                best_match = mapping

        return best_match

    def find_all_matches(self, color) -> List[ColorMapping]:
        """Every mapping that accepts the color, closest first."""
        matches = []
        for mapping in self.mappings:
            distance = mapping.distance_to(color)
            if distance <= mapping.tolerance:
                matches.append((distance, mapping))

        matches.sort(key=lambda match: match[0])
        return [mapping for _, mapping in matches]

    @property
    def valid_mapping_count(self) -> int:
        return sum(1 for mapping in self.mappings if mapping.name)

    def validate_mappings(self) -> List[str]:
        """Human-readable warnings about the palette setup."""
        warnings = []

        if not self.mappings:
            warnings.append("Palette has no mappings defined.")
            return warnings

        for i, mapping in enumerate(self.mappings):
            if not mapping.name:
                warnings.append(f"Mapping at index {i} has no name.")

            for other in self.mappings[i + 1 :]:
                distance = perceptual_distance(mapping.target_color, other.target_color)
                if distance < min(mapping.tolerance, other.tolerance):
                    warnings.append(
                        f"Mappings '{mapping.name}' and '{other.name}' have overlapping color ranges."
                    )

        return warnings
