"""
Geohash codec: pure functions between lat/lon coordinates and geohash strings.

A geohash interleaves longitude and latitude bisection bits, longitude
first, and writes them 5 bits at a time using a base-32 alphabet. Each
additional character divides the cell into 32 sub-cells: 8 columns by 4
rows on odd lengths, 4 columns by 8 rows on even lengths.

Cell sizes (degrees, lon width x lat height):
- 1: 45 x 45
- 2: 11.25 x 5.625
- 3: 1.40625 x 1.40625
- 4: 0.3515625 x 0.17578125
- 5: ~0.044 x ~0.044
- 6: ~0.011 x ~0.0055

Encoding and decoding go through pygeohash. All functions are stateless
and safe to call from any thread.
"""

from typing import List

import pygeohash as pgh

from .errors import InvalidGeohashError
from .shapes import Point, Rectangle


# Base32 alphabet used for geohash encoding (excludes a, i, l, o). Its
# characters are in ascending ASCII order.
ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"

_DECODE = {c: i for i, c in enumerate(ALPHABET)}

MAX_PRECISION = 24
"""Beyond this length, double lat/lon values can't tell geohashes apart."""

_CHUNK = 12
"""Longest geohash pygeohash encodes or decodes in one call."""


def _build_size_tables():
    heights = [180.0]
    widths = [360.0]
    even = False
    for _ in range(MAX_PRECISION):
        heights.append(heights[-1] / (8 if even else 4))
        widths.append(widths[-1] / (4 if even else 8))
        even = not even
    return heights, widths


_LAT_HEIGHTS, _LON_WIDTHS = _build_size_tables()


def hash_len_to_lat_height(length: int) -> float:
    """Latitude height in degrees of a cell with a geohash of this length."""
    return _LAT_HEIGHTS[length]


def hash_len_to_lon_width(length: int) -> float:
    """Longitude width in degrees of a cell with a geohash of this length."""
    return _LON_WIDTHS[length]


def encode(lat: float, lon: float, precision: int) -> str:
    """
    Encode a latitude/longitude pair to a geohash.

    pygeohash encodes at most _CHUNK characters. Longer geohashes are built
    chunk by chunk: the point is rescaled from the cell of the previous
    chunk to world coordinates and encoded again. A chunk has an even
    length, so every cell it names splits exactly like the world.

    Args:
        lat: Latitude in degrees [-90, 90]
        lon: Longitude in degrees [-180, 180]
        precision: Length of the geohash [0, MAX_PRECISION]

    Returns:
        Geohash string of exactly `precision` characters

    Example:
        >>> encode(48.669, -4.329, 5)
        'gbsuv'
    """
    if not 0 <= precision <= MAX_PRECISION:
        raise ValueError(
            f"Precision must be between 0 and {MAX_PRECISION}, got {precision}"
        )

    chunks = []
    remaining = precision
    while remaining > 0:
        length = min(remaining, _CHUNK)
        chunk = pgh.encode(lat, lon, precision=length)
        chunks.append(chunk)
        remaining -= length
        if remaining:
            cell = _chunk_boundary(chunk)
            lon = (lon - cell.min_x) * (360.0 / cell.width) - 180.0
            lat = (lat - cell.min_y) * (180.0 / cell.height) - 90.0

    return "".join(chunks)


def _chunk_boundary(chunk: str) -> Rectangle:
    lat, lon, lat_err, lon_err = pgh.decode_exactly(chunk)
    return Rectangle(lon - lon_err, lon + lon_err, lat - lat_err, lat + lat_err)


def decode_boundary(geohash: str) -> Rectangle:
    """
    Decode a geohash into the rectangle it covers.

    The empty geohash decodes to the whole world.

    Args:
        geohash: Geohash string

    Returns:
        Rectangle with x = longitude and y = latitude

    Raises:
        InvalidGeohashError: On a character outside the alphabet
    """
    for char in geohash:
        if char not in _DECODE:
            raise InvalidGeohashError(
                f"Invalid geohash character {char!r} in {geohash!r}"
            )

    min_x, max_x, min_y, max_y = -180.0, 180.0, -90.0, 90.0
    for start in range(0, len(geohash), _CHUNK):
        cell = _chunk_boundary(geohash[start:start + _CHUNK])
        x_scale = (max_x - min_x) / 360.0
        y_scale = (max_y - min_y) / 180.0
        min_x, max_x = (
            min_x + (cell.min_x + 180.0) * x_scale,
            min_x + (cell.max_x + 180.0) * x_scale,
        )
        min_y, max_y = (
            min_y + (cell.min_y + 90.0) * y_scale,
            min_y + (cell.max_y + 90.0) * y_scale,
        )

    return Rectangle(min_x, max_x, min_y, max_y)


def decode(geohash: str) -> Point:
    """
    Decode a geohash into the center of its cell.

    Raises:
        InvalidGeohashError: On a character outside the alphabet
    """
    return decode_boundary(geohash).get_center()


def sub_geohashes(geohash: str) -> List[str]:
    """
    List the 32 geohashes one character longer than `geohash`.

    Returns:
        Child geohashes in ascending order
    """
    return [geohash + c for c in ALPHABET]


def lookup_hash_len_for_width_height(lon_err: float, lat_err: float) -> int:
    """
    Find the shortest geohash whose cell fits within the given error.

    Args:
        lon_err: Acceptable longitude width in degrees
        lat_err: Acceptable latitude height in degrees

    Returns:
        Length in [1, MAX_PRECISION]; larger errors never give a longer hash
    """
    for length in range(1, MAX_PRECISION):
        if _LAT_HEIGHTS[length] <= lat_err and _LON_WIDTHS[length] <= lon_err:
            return length
    return MAX_PRECISION
