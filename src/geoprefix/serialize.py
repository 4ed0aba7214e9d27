"""
Token stream serialization.

Index storage keeps cells as their raw tokens. This module packs a
sequence of cell tokens into one blob and reads them back as cells.

Binary Format:
- Tokens are written in the given order
- Each token is a varint length followed by the token bytes
- A leaf token keeps its trailing leaf marker byte
- The whole stream may be zlib compressed

Reading reuses a single cell by default: the yielded cell is re-pointed at
each token inside the blob, so hold on to the token bytes, not the cell.
"""

from typing import Iterable, Iterator
import zlib

from .cell import Cell
from .errors import TokenFormatError
from .tree import SpatialPrefixTree


def _encode_varint(value: int) -> bytes:
    """Encode a non-negative integer using variable-length encoding."""
    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)
    return bytes(result)


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    """Read a varint at pos; returns (value, position after it)."""
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise TokenFormatError("Unexpected end of data in token length")
        b = data[pos]
        pos += 1
        result |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            return result, pos
        shift += 7


def serialize_cells(cells: Iterable[Cell], compress: bool = False) -> bytes:
    """
    Serialize cell tokens to bytes.

    Args:
        cells: Cells to write, in order
        compress: Whether to apply zlib compression

    Returns:
        Serialized (and optionally compressed) bytes
    """
    buffer = bytearray()
    for cell in cells:
        token = cell.get_token_bytes()
        buffer.extend(_encode_varint(len(token)))
        buffer.extend(token)

    data = bytes(buffer)
    if compress:
        data = zlib.compress(data, level=9)
    return data


def iter_cells(
    tree: SpatialPrefixTree,
    data: bytes,
    compressed: bool = False,
    reuse: bool = True,
) -> Iterator[Cell]:
    """
    Iterate over the cells of a serialized token stream.

    Args:
        tree: Tree the tokens belong to
        data: Serialized bytes
        compressed: Whether data is zlib compressed
        reuse: Yield one cell instance reset to each token instead of a
            new cell per token

    Yields:
        Cells viewing the tokens in the stream
    """
    if compressed:
        data = zlib.decompress(data)

    cell = None
    pos = 0
    while pos < len(data):
        length, pos = _read_varint(data, pos)
        if pos + length > len(data):
            raise TokenFormatError(
                f"Token of {length} bytes at offset {pos} runs past end of data"
            )
        if cell is None or not reuse:
            cell = tree.read_cell(data, pos, length)
        else:
            cell.reset(data, pos, length)
        yield cell
        pos += length


def deserialize_cells(
    tree: SpatialPrefixTree, data: bytes, compressed: bool = False
) -> list[Cell]:
    """Read every cell of a serialized token stream into a list."""
    return list(iter_cells(tree, data, compressed=compressed, reuse=False))
