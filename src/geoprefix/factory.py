"""
Prefix tree factory: builds a configured tree from index settings.

Settings come either as a PrefixTreeConfig or as a string bag, the way an
index schema declares them:

- prefixTree: tree implementation name ("geohash")
- maxLevels: explicit maximum level
- maxDistErr: finest cell size wanted, in degrees; used when maxLevels
  is absent
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Mapping, Optional, Union

from .context import GEO, SpatialContext, dist_to_degrees
from .errors import InvalidLevelCountError
from .tree import SpatialPrefixTree


logger = logging.getLogger(__name__)

PREFIX_TREE = "prefixTree"
MAX_LEVELS = "maxLevels"
MAX_DIST_ERR = "maxDistErr"

DEFAULT_GEO_MAX_DETAIL_KM = 0.001
"""Default finest cell size for geo trees: 1 meter."""


@dataclass
class PrefixTreeConfig:
    """Configuration for building a prefix tree."""

    prefix_tree: Optional[str] = None
    """Implementation name; None picks the default for the context."""

    max_levels: Optional[int] = None
    """Maximum tree level. Takes precedence over max_dist_err."""

    max_dist_err: Optional[float] = None
    """Finest cell size in degrees, used to derive max_levels."""

    def __post_init__(self):
        if self.max_levels is not None and self.max_levels <= 0:
            raise InvalidLevelCountError(
                f"max_levels must be positive, got {self.max_levels}"
            )
        if self.max_dist_err is not None and self.max_dist_err < 0:
            raise ValueError("max_dist_err must be non-negative")

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "PrefixTreeConfig":
        """
        Parse a string settings bag.

        Args:
            args: Mapping with optional prefixTree, maxLevels and maxDistErr

        Returns:
            Validated configuration
        """
        max_levels = args.get(MAX_LEVELS)
        max_dist_err = args.get(MAX_DIST_ERR)
        try:
            if max_levels is not None:
                max_levels = int(max_levels)
            if max_dist_err is not None:
                max_dist_err = float(max_dist_err)
        except ValueError as e:
            raise ValueError(f"Invalid prefix tree settings {dict(args)}: {e}") from e

        return cls(
            prefix_tree=args.get(PREFIX_TREE),
            max_levels=max_levels,
            max_dist_err=max_dist_err,
        )


class SpatialPrefixTreeFactory(ABC):
    """
    Builds trees of one implementation with useful defaults.

    Call init() once, then new_tree() for each tree wanted.
    """

    def __init__(self):
        self.config: Optional[PrefixTreeConfig] = None
        self.ctx: Optional[SpatialContext] = None
        self.max_levels: Optional[int] = None

    def init(self, config: PrefixTreeConfig, ctx: SpatialContext) -> None:
        """
        Initialize the factory.

        Args:
            config: Tree settings
            ctx: Spatial context trees will cover
        """
        self.config = config
        self.ctx = ctx
        self._init_max_levels()

    def _init_max_levels(self) -> None:
        if self.config.max_levels is not None:
            self.max_levels = self.config.max_levels
            return

        if self.config.max_dist_err is not None:
            degrees = self.config.max_dist_err
        elif self.ctx.geo:
            degrees = dist_to_degrees(DEFAULT_GEO_MAX_DETAIL_KM)
        else:
            # Non-geo without a hint: the tree's own default.
            return

        self.max_levels = self.get_level_for_distance(degrees)
        logger.debug("Resolved max_levels=%d for %g degrees", self.max_levels, degrees)

    @abstractmethod
    def get_level_for_distance(self, dist: float) -> int:
        """Level for dist, computed on the finest grid this implementation has."""

    @abstractmethod
    def new_tree(self) -> SpatialPrefixTree:
        """Build a tree from the resolved settings."""


def make_prefix_tree(
    config: Union[PrefixTreeConfig, Mapping[str, str], None] = None,
    ctx: SpatialContext = GEO,
) -> SpatialPrefixTree:
    """
    Convenience function to build a prefix tree.

    Args:
        config: Settings, as a PrefixTreeConfig or a string bag
        ctx: Spatial context the tree covers

    Returns:
        Configured SpatialPrefixTree
    """
    if config is None:
        config = PrefixTreeConfig()
    elif not isinstance(config, PrefixTreeConfig):
        config = PrefixTreeConfig.from_args(config)

    name = config.prefix_tree or ("geohash" if ctx.geo else "quad")

    factory: SpatialPrefixTreeFactory
    if name.lower() == "geohash":
        from .geohash_tree import GeohashPrefixTreeFactory
        factory = GeohashPrefixTreeFactory()
    else:
        raise ValueError(f"Unknown prefix tree {name!r}; supported: geohash")

    factory.init(config, ctx)
    tree = factory.new_tree()
    logger.debug("Built %r", tree)
    return tree
