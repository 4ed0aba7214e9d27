"""Tests for the prefix tree factory."""

import pytest
from geoprefix.context import GEO, SpatialContext, dist_to_degrees
from geoprefix.errors import InvalidLevelCountError, InvalidWorldBoundsError
from geoprefix.factory import (
    DEFAULT_GEO_MAX_DETAIL_KM,
    PrefixTreeConfig,
    make_prefix_tree,
)
from geoprefix.geohash_tree import GeohashPrefixTree, GeohashPrefixTreeFactory
from geoprefix.shapes import Rectangle


class TestPrefixTreeConfig:
    """Tests for PrefixTreeConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        config = PrefixTreeConfig()
        assert config.prefix_tree is None
        assert config.max_levels is None
        assert config.max_dist_err is None

    def test_from_args(self):
        """Test parsing a string settings bag."""
        config = PrefixTreeConfig.from_args(
            {"prefixTree": "geohash", "maxLevels": "7", "maxDistErr": "0.5"}
        )
        assert config.prefix_tree == "geohash"
        assert config.max_levels == 7
        assert config.max_dist_err == 0.5

    def test_from_args_empty(self):
        """Test an empty bag gives the defaults."""
        assert PrefixTreeConfig.from_args({}) == PrefixTreeConfig()

    def test_from_args_not_a_number(self):
        """Test unparseable numbers fail."""
        with pytest.raises(ValueError):
            PrefixTreeConfig.from_args({"maxLevels": "many"})
        with pytest.raises(ValueError):
            PrefixTreeConfig.from_args({"maxDistErr": "far"})

    def test_invalid_max_levels(self):
        """Test non-positive max_levels fail."""
        with pytest.raises(InvalidLevelCountError):
            PrefixTreeConfig(max_levels=0)
        with pytest.raises(InvalidLevelCountError):
            PrefixTreeConfig.from_args({"maxLevels": "0"})

    def test_invalid_max_dist_err(self):
        """Test negative distances fail."""
        with pytest.raises(ValueError):
            PrefixTreeConfig(max_dist_err=-1.0)


class TestMakePrefixTree:
    """Tests for make_prefix_tree."""

    def test_default_geo_tree(self):
        """Test the default tree resolves to 1 meter cells."""
        tree = make_prefix_tree()
        assert isinstance(tree, GeohashPrefixTree)
        degrees = dist_to_degrees(DEFAULT_GEO_MAX_DETAIL_KM)
        assert tree.max_levels == GeohashPrefixTree(GEO, 24).get_level_for_distance(degrees)
        assert tree.max_levels == 11

    def test_explicit_max_levels(self):
        """Test maxLevels is used as is."""
        assert make_prefix_tree({"maxLevels": "7"}).max_levels == 7

    def test_max_dist_err(self):
        """Test maxDistErr picks the level."""
        assert make_prefix_tree({"maxDistErr": "1.40625"}).max_levels == 3
        assert make_prefix_tree(PrefixTreeConfig(max_dist_err=45.0)).max_levels == 1

    def test_max_levels_wins(self):
        """Test maxLevels takes precedence over maxDistErr."""
        tree = make_prefix_tree({"maxLevels": "9", "maxDistErr": "45"})
        assert tree.max_levels == 9

    def test_name_case_insensitive(self):
        """Test implementation names ignore case."""
        tree = make_prefix_tree({"prefixTree": "GeoHash", "maxLevels": "5"})
        assert isinstance(tree, GeohashPrefixTree)

    def test_unknown_name(self):
        """Test unknown implementations fail."""
        with pytest.raises(ValueError):
            make_prefix_tree({"prefixTree": "s2"})

    def test_too_many_levels(self):
        """Test the tree checks the level count."""
        with pytest.raises(InvalidLevelCountError):
            make_prefix_tree({"maxLevels": "25"})

    def test_non_geo_default_name(self):
        """Test a non-geo context has no default implementation here."""
        ctx = SpatialContext(geo=False)
        with pytest.raises(ValueError):
            make_prefix_tree(None, ctx)

    def test_non_geo_geohash_uses_max_possible(self):
        """Test a non-geo context without hints gets the tree default."""
        ctx = SpatialContext(geo=False)
        tree = make_prefix_tree({"prefixTree": "geohash"}, ctx)
        assert tree.max_levels == 24

    def test_invalid_world_bounds(self):
        """Test the tree checks the world bounds."""
        ctx = SpatialContext(world_bounds=Rectangle(0, 360, -90, 90))
        with pytest.raises(InvalidWorldBoundsError):
            make_prefix_tree({"maxLevels": "5"}, ctx)


class TestGeohashPrefixTreeFactory:
    """Tests for GeohashPrefixTreeFactory."""

    def test_level_uses_finest_grid(self):
        """Test level selection ignores the configured max_levels."""
        factory = GeohashPrefixTreeFactory()
        factory.init(PrefixTreeConfig(max_levels=3), GEO)
        assert factory.get_level_for_distance(1e-9) == 16
        assert factory.get_level_for_distance(1e-15) == 24
        assert factory.new_tree().get_level_for_distance(1e-9) == 3

    def test_new_tree_default(self):
        """Test non-geo without hints builds the deepest tree."""
        factory = GeohashPrefixTreeFactory()
        factory.init(PrefixTreeConfig(), SpatialContext(geo=False))
        assert factory.max_levels is None
        assert factory.new_tree().max_levels == 24

    def test_new_trees_are_independent(self):
        """Test each call builds a new tree."""
        factory = GeohashPrefixTreeFactory()
        factory.init(PrefixTreeConfig(max_levels=6), GEO)
        assert factory.new_tree() is not factory.new_tree()
