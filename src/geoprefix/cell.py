"""
Cells: the nodes of a spatial prefix tree.

A cell is a view over a token, a run of ASCII bytes inside a backing
buffer. The token length is the cell's level; a trailing LEAF_BYTE marks
an exact (terminal) cell without changing its level or shape. A token
that is a prefix of another identifies an ancestor of that cell.

Cells are cheap, mutable handles. ``reset`` re-points a cell at another
token so traversals can reuse one instance instead of allocating a cell
per node. That makes a cell single-owner: never share one across threads.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from functools import total_ordering
from typing import TYPE_CHECKING, List, Optional, Union

from .shapes import Point, Rectangle, SpatialRelation

if TYPE_CHECKING:
    from .tree import SpatialPrefixTree


LEAF_BYTE = 0x2B
"""'+', sorts before every geohash character."""

# Marks a derived value that hasn't been computed for the current token.
_UNSET = object()

TokenBuffer = Union[bytes, bytearray, memoryview]


@total_ordering
class Cell(ABC):
    """
    Abstract cell of a spatial prefix tree.

    Attributes:
        shape_rel: Relation of this cell's shape to the filter shape that
            produced it in get_sub_cells(), None otherwise
    """

    def __init__(
        self,
        tree: SpatialPrefixTree,
        buffer: TokenBuffer,
        offset: int = 0,
        length: Optional[int] = None,
    ):
        """
        Args:
            tree: Tree this cell belongs to
            buffer: Backing buffer holding the token; not copied
            offset: Start of the token in the buffer
            length: Token length including any leaf marker; None means up
                to the end of the buffer
        """
        self._tree = tree
        self._owns_buffer = False
        self._bind(buffer, offset, length)

    def _bind(self, buffer: TokenBuffer, offset: int, length: Optional[int]) -> None:
        if length is None:
            length = len(buffer) - offset
        if offset < 0 or length < 0 or offset + length > len(buffer):
            raise ValueError(
                f"Token range offset={offset}, length={length} outside "
                f"buffer of {len(buffer)} bytes"
            )
        self._buffer = buffer
        self._offset = offset
        self._length = length
        self._shape = _UNSET
        self.shape_rel: Optional[SpatialRelation] = None

    @property
    def tree(self) -> SpatialPrefixTree:
        return self._tree

    def reset(
        self, buffer: TokenBuffer, offset: int = 0, length: Optional[int] = None
    ) -> None:
        """
        Re-point this cell at another token.

        Every cached value derived from the previous token is dropped.
        """
        self._owns_buffer = False
        self._bind(buffer, offset, length)

    @property
    def level(self) -> int:
        """Depth in the tree: token length without the leaf marker."""
        return self._length - 1 if self.is_leaf() else self._length

    def get_level(self) -> int:
        return self.level

    def is_leaf(self) -> bool:
        """True if the token ends with LEAF_BYTE."""
        return (
            self._length > 0
            and self._buffer[self._offset + self._length - 1] == LEAF_BYTE
        )

    def set_leaf(self) -> None:
        """
        Append the leaf marker to this cell's token.

        Writes into the spare trailing byte when the cell allocated its own
        buffer with one; otherwise the token is copied so a caller's buffer
        is never written to.
        """
        if self.is_leaf():
            return
        end = self._offset + self._length
        if self._owns_buffer and end < len(self._buffer):
            self._buffer[end] = LEAF_BYTE
            self._length += 1
            return
        token = bytearray(self.get_token_bytes())
        token.append(LEAF_BYTE)
        self._buffer = token
        self._offset = 0
        self._length = len(token)
        self._owns_buffer = True

    def get_token_bytes(self) -> bytes:
        """The token, leaf marker included."""
        return bytes(self._buffer[self._offset:self._offset + self._length])

    def get_token_bytes_no_leaf(self) -> bytes:
        level = self.level
        return bytes(self._buffer[self._offset:self._offset + level])

    def get_token_string(self) -> str:
        """The token without leaf marker, as text."""
        return self.get_token_bytes_no_leaf().decode("latin-1")

    def is_prefix_of(self, other: Cell) -> bool:
        """True if this cell is other or one of its ancestors."""
        return other.get_token_bytes_no_leaf().startswith(self.get_token_bytes_no_leaf())

    def get_sub_cells(
        self, shape_filter: Optional[Union[Point, Rectangle]] = None
    ) -> List[Cell]:
        """
        Get the children of this cell, one level down.

        Args:
            shape_filter: None for all children in token order. A Point gives
                the single child containing it. A Rectangle gives the
                children that aren't disjoint from it; each gets its
                relation in shape_rel and children within the rectangle are
                marked as leaves.

        Returns:
            Child cells in ascending token order; none for a cell already at
            the tree's max_levels
        """
        if self.level >= self._tree.max_levels:
            return []

        if isinstance(shape_filter, Point):
            sub_cell = self.get_sub_cell(shape_filter)
            sub_cell.shape_rel = SpatialRelation.CONTAINS
            return [sub_cell]

        cells = self._get_all_sub_cells()
        if shape_filter is None:
            return cells

        matching = []
        for cell in cells:
            rel = cell.get_shape().relate(shape_filter)
            if rel is SpatialRelation.DISJOINT:
                continue
            cell.shape_rel = rel
            if rel is SpatialRelation.WITHIN:
                cell.set_leaf()
            matching.append(cell)
        return matching

    @abstractmethod
    def _get_all_sub_cells(self) -> List[Cell]:
        """All children in ascending token order."""

    @abstractmethod
    def get_sub_cells_size(self) -> int:
        """Number of children every non-leaf cell has."""

    def get_sub_cell(self, point: Point) -> Cell:
        """
        Get the child cell containing point.

        Not performant: the point is encoded again from the root rather than
        one level down. Don't call this in a loop.
        """
        return self._tree.get_cell(point, self.level + 1)

    def get_shape(self) -> Rectangle:
        """The rectangle covering this cell; computed once per token."""
        if self._shape is _UNSET:
            self._shape = self._make_shape()
        return self._shape

    @abstractmethod
    def _make_shape(self) -> Rectangle:
        """Decode the token into the rectangle it covers."""

    def get_center(self) -> Point:
        return self.get_shape().get_center()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.get_token_bytes() == other.get_token_bytes()

    def __lt__(self, other: Cell) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.get_token_bytes() < other.get_token_bytes()

    def __hash__(self) -> int:
        return hash(self.get_token_bytes())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_token_bytes().decode('latin-1')!r})"
