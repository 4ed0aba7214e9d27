"""
Spatial prefix tree: a hierarchical grid of cells addressed by tokens.

Points and shapes are indexed as the tokens of the cells covering them,
at one or several levels, so that spatial queries become token prefix
queries. Concrete trees bind this contract to a grid encoding such as
geohash.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import math
from typing import List, Optional

from .cell import Cell, TokenBuffer
from .context import SpatialContext
from .errors import InvalidLevelCountError
from .shapes import Point


class SpatialPrefixTree(ABC):
    """
    Abstract spatial prefix tree.

    The configuration is fixed at construction; a tree may be shared by
    any number of threads.
    """

    def __init__(self, ctx: SpatialContext, max_levels: int):
        """
        Args:
            ctx: Spatial context the grid covers
            max_levels: Deepest level cells can be built at
        """
        if max_levels <= 0:
            raise InvalidLevelCountError(f"max_levels must be positive, got {max_levels}")
        self._ctx = ctx
        self._max_levels = max_levels

    @property
    def ctx(self) -> SpatialContext:
        return self._ctx

    @property
    def max_levels(self) -> int:
        return self._max_levels

    @abstractmethod
    def get_level_for_distance(self, dist: float) -> int:
        """
        Get the coarsest level whose cells are no larger than dist.

        Args:
            dist: Cell width/height in the context's units (degrees for geo);
                0 asks for the finest level

        Returns:
            Level in [1, max_levels]
        """

    def get_distance_for_level(self, level: int) -> float:
        """
        Get the size of a cell at the given level.

        Uses the diagonal of the cell at the world center. For a geo context
        this over-estimates the true distance, which is fine for sizing.

        Args:
            level: Level in [1, max_levels]

        Returns:
            Cell diagonal in the context's units
        """
        if level < 1 or level > self._max_levels:
            raise ValueError(
                f"Level must be in 1 to {self._max_levels} range, got {level}"
            )
        cell = self.get_cell(self._ctx.world_bounds.get_center(), level)
        bbox = cell.get_shape().get_bounding_box()
        return math.hypot(bbox.width, bbox.height)

    @abstractmethod
    def get_world_cell(self) -> Cell:
        """The level 0 cell covering the whole world (empty token)."""

    @abstractmethod
    def get_cell(self, point: Point, level: int) -> Cell:
        """
        Get the cell containing point at the given level.

        The returned cell has exactly `level` token bytes and no leaf marker.
        """

    @abstractmethod
    def read_cell(
        self, token: TokenBuffer, offset: int = 0, length: Optional[int] = None
    ) -> Cell:
        """
        Wrap raw token bytes as a cell without decoding them.

        Args:
            token: Buffer holding the token; not copied
            offset: Start of the token in the buffer
            length: Token length, leaf marker included; None means to the
                end of the buffer
        """

    def get_cells(
        self, point: Point, detail_level: int, include_parents: bool = True
    ) -> List[Cell]:
        """
        Get the cells to index a point with.

        Args:
            point: Point to index
            detail_level: Level of the finest cell
            include_parents: Also return every ancestor from level 1

        Returns:
            Cells from coarse to fine; the finest one is marked as a leaf
        """
        if detail_level < 1 or detail_level > self._max_levels:
            raise ValueError(
                f"Level must be in 1 to {self._max_levels} range, got {detail_level}"
            )
        cell = self.get_cell(point, detail_level)
        cell.set_leaf()
        if not include_parents:
            return [cell]

        token = cell.get_token_bytes_no_leaf()
        cells = [self.read_cell(token, 0, level) for level in range(1, detail_level)]
        cells.append(cell)
        return cells

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_levels={self._max_levels}, "
            f"ctx={self._ctx!r})"
        )
