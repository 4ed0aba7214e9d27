"""Exceptions raised by the prefix tree, its cells and the geohash codec."""


class GeoPrefixError(Exception):
    """Base class for all geoprefix errors."""


class InvalidWorldBoundsError(GeoPrefixError, ValueError):
    """World bounds of the spatial context don't start at longitude -180."""


class InvalidLevelCountError(GeoPrefixError, ValueError):
    """Requested maximum level is outside [1, max precision]."""


class InvalidGeohashError(GeoPrefixError, ValueError):
    """A token contains a character outside the geohash alphabet."""


class TokenFormatError(GeoPrefixError, ValueError):
    """A serialized token stream is truncated or malformed."""
