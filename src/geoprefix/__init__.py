"""
geoprefix: a geohash-based spatial prefix tree.

This package decomposes the surface of the Earth into a nested grid of
cells addressed by geohash tokens, so that a search index can store
points at multiple precisions and answer spatial queries by token prefix
matching.
"""

__version__ = "0.1.0"

from .shapes import Point, Rectangle, SpatialRelation
from .context import SpatialContext, GEO, dist_to_degrees, degrees_to_dist
from .errors import (
    GeoPrefixError,
    InvalidWorldBoundsError,
    InvalidLevelCountError,
    InvalidGeohashError,
    TokenFormatError,
)
from .cell import Cell, LEAF_BYTE
from .tree import SpatialPrefixTree
from .factory import PrefixTreeConfig, SpatialPrefixTreeFactory, make_prefix_tree
from .geohash_tree import GeohashPrefixTree, GeohashCell, GeohashPrefixTreeFactory
from .serialize import serialize_cells, iter_cells, deserialize_cells

__all__ = [
    "Point",
    "Rectangle",
    "SpatialRelation",
    "SpatialContext",
    "GEO",
    "dist_to_degrees",
    "degrees_to_dist",
    "GeoPrefixError",
    "InvalidWorldBoundsError",
    "InvalidLevelCountError",
    "InvalidGeohashError",
    "TokenFormatError",
    "Cell",
    "LEAF_BYTE",
    "SpatialPrefixTree",
    "PrefixTreeConfig",
    "SpatialPrefixTreeFactory",
    "make_prefix_tree",
    "GeohashPrefixTree",
    "GeohashCell",
    "GeohashPrefixTreeFactory",
    "serialize_cells",
    "iter_cells",
    "deserialize_cells",
]
