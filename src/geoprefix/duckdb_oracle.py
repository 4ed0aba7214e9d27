"""
DuckDB-based geohash oracle.

Uses the ST_GeoHash function of DuckDB's spatial extension as an
independent geohash implementation to check the package codec against.
"""

import logging
from typing import List, Optional, Tuple

import duckdb

from .oracle import GeohashOracle


logger = logging.getLogger(__name__)


class DuckDBGeohashOracle(GeohashOracle):
    """
    Oracle implementation using DuckDB spatial extension.

    Queries run against an in-memory connection; nothing is stored.
    """

    def __init__(self, install_extension: bool = True):
        """
        Initialize the DuckDB oracle.

        Args:
            install_extension: Install the spatial extension before loading it
        """
        self._con: Optional[duckdb.DuckDBPyConnection] = duckdb.connect(":memory:")
        if install_extension:
            self._con.install_extension("spatial")
        self._con.load_extension("spatial")

    def encode(self, lat: float, lon: float, precision: int) -> str:
        """
        Geohash of a point, from ST_GeoHash.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees
            precision: Geohash length

        Returns:
            Geohash string
        """
        result = self._con.execute(
            "SELECT ST_GeoHash(ST_Point(?, ?), ?)", [lon, lat, precision]
        ).fetchone()
        return result[0]

    def encode_batch(
        self, points: List[Tuple[float, float]], precision: int
    ) -> List[str]:
        """
        Geohashes of multiple points in a single query.

        Much faster than calling encode() repeatedly due to reduced
        Python<->DuckDB round-trip overhead.

        Args:
            points: List of (lat, lon) tuples
            precision: Geohash length

        Returns:
            List of geohashes in the same order as input points
        """
        if not points:
            return []

        values_list = ", ".join(
            f"({float(lon)!r}, {float(lat)!r}, {idx})"
            for idx, (lat, lon) in enumerate(points)
        )
        query = f"""
            WITH points AS (
                SELECT col0 AS lon, col1 AS lat, col2 AS idx
                FROM (VALUES {values_list})
            )
            SELECT idx, ST_GeoHash(ST_Point(lon, lat), {int(precision)})
            FROM points
            ORDER BY idx
        """
        logger.debug("Encoding %d points at precision %d", len(points), precision)
        rows = self._con.execute(query).fetchall()
        return [geohash for _, geohash in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self._con:
            self._con.close()
            self._con = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
