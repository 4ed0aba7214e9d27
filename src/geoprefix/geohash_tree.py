"""
Geohash realization of the spatial prefix tree.

Cell tokens are geohashes, so a cell at level L has a token of L
characters and 32 children. All encoding and decoding is done by the
geoprefix.geohash codec.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from . import geohash
from .cell import _UNSET, LEAF_BYTE, Cell, TokenBuffer
from .context import SpatialContext
from .errors import InvalidLevelCountError, InvalidWorldBoundsError
from .factory import SpatialPrefixTreeFactory
from .shapes import Point, Rectangle
from .tree import SpatialPrefixTree


logger = logging.getLogger(__name__)


def get_max_levels_possible() -> int:
    """Any more levels and double lat/lon can't tell cells apart."""
    return geohash.MAX_PRECISION


class GeohashPrefixTree(SpatialPrefixTree):
    """A spatial prefix tree whose cells are geohashes."""

    def __init__(self, ctx: SpatialContext, max_levels: int):
        """
        Args:
            ctx: Spatial context; its world bounds must start at longitude -180
            max_levels: Maximum level in [1, get_max_levels_possible()]

        Raises:
            InvalidWorldBoundsError: If the world bounds aren't lat/lon
            InvalidLevelCountError: If max_levels is out of range
        """
        bounds = ctx.world_bounds
        if bounds.min_x != -180:
            raise InvalidWorldBoundsError(
                f"Geohash only supports lat-lon world bounds. Got {bounds}"
            )
        max_possible = get_max_levels_possible()
        if max_levels <= 0 or max_levels > max_possible:
            raise InvalidLevelCountError(
                f"max_levels must be [1-{max_possible}] but got {max_levels}"
            )
        super().__init__(ctx, max_levels)
        logger.debug("Created geohash prefix tree with max_levels=%d", max_levels)

    def get_level_for_distance(self, dist: float) -> int:
        if dist == 0:
            return self._max_levels
        level = geohash.lookup_hash_len_for_width_height(dist, dist)
        return max(min(level, self._max_levels), 1)

    def get_world_cell(self) -> GeohashCell:
        return GeohashCell.from_geohash(self, "")

    def get_cell(self, point: Point, level: int) -> GeohashCell:
        return GeohashCell.from_geohash(self, geohash.encode(point.y, point.x, level))

    def read_cell(
        self, token: TokenBuffer, offset: int = 0, length: Optional[int] = None
    ) -> GeohashCell:
        return GeohashCell(self, token, offset, length)


class GeohashCell(Cell):
    """
    A cell whose token is a geohash.

    The geohash string (never including the leaf marker) is decoded from
    the token bytes on first use and cached until reset.
    """

    def __init__(
        self,
        tree: GeohashPrefixTree,
        buffer: TokenBuffer,
        offset: int = 0,
        length: Optional[int] = None,
    ):
        super().__init__(tree, buffer, offset, length)
        self._geohash = _UNSET

    @classmethod
    def from_geohash(cls, tree: GeohashPrefixTree, token: str) -> GeohashCell:
        """
        Build a cell from a geohash string, optionally ending in the leaf marker.

        The buffer gets one spare trailing byte so set_leaf() can append the
        marker in place.
        """
        buffer = bytearray(len(token) + 1)
        buffer[:len(token)] = token.encode("ascii")
        cell = cls(tree, buffer, 0, len(token))
        cell._owns_buffer = True
        if token and ord(token[-1]) == LEAF_BYTE:
            cell._geohash = token[:-1]
        else:
            cell._geohash = token
        return cell

    def reset(
        self, buffer: TokenBuffer, offset: int = 0, length: Optional[int] = None
    ) -> None:
        super().reset(buffer, offset, length)
        self._geohash = _UNSET

    def get_geohash(self) -> str:
        if self._geohash is _UNSET:
            self._geohash = self.get_token_string()
        return self._geohash

    def _get_all_sub_cells(self) -> List[Cell]:
        return [
            GeohashCell.from_geohash(self._tree, sub)
            for sub in geohash.sub_geohashes(self.get_geohash())
        ]

    def get_sub_cells_size(self) -> int:
        return 32  # 8x4

    def _make_shape(self) -> Rectangle:
        return geohash.decode_boundary(self.get_geohash())

    def get_center(self) -> Point:
        return geohash.decode(self.get_geohash())


class GeohashPrefixTreeFactory(SpatialPrefixTreeFactory):
    """Factory for GeohashPrefixTree instances with useful defaults."""

    def get_level_for_distance(self, dist: float) -> int:
        grid = GeohashPrefixTree(self.ctx, get_max_levels_possible())
        return grid.get_level_for_distance(dist)

    def new_tree(self) -> GeohashPrefixTree:
        max_levels = self.max_levels
        if max_levels is None:
            max_levels = get_max_levels_possible()
        return GeohashPrefixTree(self.ctx, max_levels)
