"""Tests for color palette matching."""

import pytest
from pydantic import ValidationError

from py_imagemap.config.palette import ColorMapping, ColorPalette
from py_imagemap.core.color_space import Color
from py_imagemap.core.kmeans import Cluster


class TestColorMapping:
    """Test single mappings."""

    def test_defaults(self):
        mapping = ColorMapping()

        assert mapping.name == "New Mapping"
        assert mapping.target_color == Color(1.0, 1.0, 1.0)
        assert mapping.tolerance == 0.2

    def test_within_tolerance(self):
        mapping = ColorMapping(name="Stone", target_color=Color(0.5, 0.5, 0.5), tolerance=0.1)

        assert mapping.is_within_tolerance(Color(0.52, 0.5, 0.5))
        assert not mapping.is_within_tolerance(Color(0.0, 0.0, 0.0))

    @pytest.mark.parametrize("tolerance", [-0.1, 1.5])
    def test_tolerance_range(self, tolerance):
        with pytest.raises(ValidationError):
            ColorMapping(tolerance=tolerance)

    def test_channel_range(self):
        with pytest.raises(ValidationError):
            ColorMapping(target_color=(2.0, 0.0, 0.0))


class TestColorPalette:
    """Test palette lookups and validation."""

    @pytest.fixture
    def palette(self):
        return ColorPalette.default()

    def test_default_mappings(self, palette):
        names = [m.name for m in palette.mappings]

        assert names == ["Grass", "Water", "Dirt", "Stone", "Snow", "Void"]
        assert palette.valid_mapping_count == 6

    def test_best_match(self, palette):
        match = palette.find_best_match(Color.from_rgb255(10, 130, 5))

        assert match is not None
        assert match.name == "Grass"

    def test_no_match(self, palette):
        assert palette.find_best_match(Color(1.0, 0.0, 1.0)) is None

    def test_closest_wins(self):
        palette = ColorPalette(
            mappings=[
                ColorMapping(name="Gray", target_color=Color(0.2, 0.2, 0.2), tolerance=1.0),
                ColorMapping(name="Black", target_color=Color(0.0, 0.0, 0.0), tolerance=1.0),
            ]
        )

        assert palette.find_best_match(Color(0.0, 0.0, 0.0)).name == "Black"
        assert [m.name for m in palette.find_all_matches(Color(0.0, 0.0, 0.0))] == [
            "Black",
            "Gray",
        ]

    def test_own_tolerance_applies(self):
        palette = ColorPalette(
            mappings=[
                ColorMapping(name="Strict", target_color=Color(0.0, 0.0, 0.0), tolerance=0.0),
                ColorMapping(name="Loose", target_color=Color(0.3, 0.3, 0.3), tolerance=1.0),
            ]
        )

        assert palette.find_best_match(Color(0.05, 0.05, 0.05)).name == "Loose"

    def test_empty_palette(self):
        palette = ColorPalette()

        assert palette.find_best_match(Color(0.0, 0.0, 0.0)) is None
        assert palette.find_all_matches(Color(0.0, 0.0, 0.0)) == []
        assert palette.validate_mappings() == ["Palette has no mappings defined."]

    def test_default_validates_clean(self, palette):
        assert palette.validate_mappings() == []

    def test_overlap_warning(self):
        palette = ColorPalette(
            mappings=[
                ColorMapping(name="A", target_color=Color(0.5, 0.5, 0.5)),
                ColorMapping(name="B", target_color=Color(0.5, 0.5, 0.5)),
            ]
        )

        assert palette.validate_mappings() == [
            "Mappings 'A' and 'B' have overlapping color ranges."
        ]

    def test_unnamed_warning(self):
        palette = ColorPalette(mappings=[ColorMapping(name="")])

        assert palette.validate_mappings() == ["Mapping at index 0 has no name."]
        assert palette.valid_mapping_count == 0

    def test_from_clusters(self):
        clusters = [
            Cluster(Color(0.0, 0.0, 1.0), frozenset(), 0.6, "Cluster_1").with_label("Water"),
            Cluster(Color(0.0, 0.5, 0.0), frozenset(), 0.4, "Cluster_2"),
        ]
        palette = ColorPalette.from_clusters(clusters, tolerance=0.1)

        assert [m.name for m in palette.mappings] == ["Water", "Cluster_2"]
        assert palette.mappings[0].target_color == Color(0.0, 0.0, 1.0)
        assert palette.mappings[1].tolerance == 0.1
