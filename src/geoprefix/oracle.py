"""
Oracle interface for geohash ground truth.

An oracle answers "what is the geohash of this point at this precision".
The package's own codec is one oracle; independent implementations (such
as DuckDB's spatial extension) are others, and comparing them checks the
codec the prefix tree is built on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Tuple

from . import geohash


class GeohashOracle(ABC):
    """Abstract base class for geohash oracles."""

    @abstractmethod
    def encode(self, lat: float, lon: float, precision: int) -> str:
        """
        Geohash of a point.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees
            precision: Geohash length

        Returns:
            Geohash string
        """
        pass

    def encode_batch(
        self, points: List[Tuple[float, float]], precision: int
    ) -> List[str]:
        """
        Geohashes of multiple points.

        Default implementation calls encode() for each point.
        Subclasses may override for better performance (e.g., batch SQL queries).

        Args:
            points: List of (lat, lon) tuples
            precision: Geohash length

        Returns:
            List of geohashes in the same order as input points
        """
        return [self.encode(lat, lon, precision) for lat, lon in points]


class CodecOracle(GeohashOracle):
    """Oracle backed by geoprefix.geohash."""

    def encode(self, lat: float, lon: float, precision: int) -> str:
        return geohash.encode(lat, lon, precision)


class FunctionOracle(GeohashOracle):
    """Oracle wrapper for a callable (lat, lon, precision) -> geohash."""

    def __init__(self, func: Callable[[float, float, int], str]):
        self._func = func

    def encode(self, lat: float, lon: float, precision: int) -> str:
        return self._func(lat, lon, precision)


@dataclass
class Mismatch:
    """A point two oracles disagree on."""
    lat: float
    lon: float
    expected: str
    actual: str


def compare_oracles(
    expected: GeohashOracle,
    actual: GeohashOracle,
    points: List[Tuple[float, float]],
    precision: int,
) -> List[Mismatch]:
    """
    Find the points two oracles encode differently.

    Args:
        expected: Reference oracle
        actual: Oracle under test
        points: List of (lat, lon) tuples
        precision: Geohash length

    Returns:
        Mismatching points, in input order
    """
    want = expected.encode_batch(points, precision)
    got = actual.encode_batch(points, precision)
    return [
        Mismatch(lat, lon, w, g)
        for (lat, lon), w, g in zip(points, want, got)
        if w != g
    ]
