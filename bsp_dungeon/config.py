"""
Generation parameters for the BSP dungeon generator.
"""

from dataclasses import dataclass


# Clearance kept between a room and the edges of its partition leaf
ROOM_MARGIN: int = 2


class ConfigurationError(ValueError):
    """Raised when a GeneratorConfig cannot produce a dungeon."""


@dataclass
class GeneratorConfig:
    """
    Settings for one dungeon layout.

    Attributes:
        width: World width in tiles
        height: World height in tiles
        min_room_size: Smallest room edge, also the smallest partition edge
        max_split_depth: Depth at which partitioning stops (root is depth 0)
        corridor_width: Corridor thickness in tiles; odd values stay centered
    """

    width: int = 100
    height: int = 100
    min_room_size: int = 8
    max_split_depth: int = 5
    corridor_width: int = 3

    def validate(self) -> None:
        """
        Check the configuration before any generation work starts.

        Raises:
            ConfigurationError: If any setting is out of range
        """
        for name in ("width", "height", "min_room_size", "max_split_depth", "corridor_width"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"World size must be positive, got {self.width}x{self.height}"
            )
        if self.min_room_size < 1:
            raise ConfigurationError(
                f"min_room_size must be at least 1, got {self.min_room_size}"
            )
        if self.max_split_depth < 0:
            raise ConfigurationError(
                f"max_split_depth must not be negative, got {self.max_split_depth}"
            )
        if self.corridor_width < 1:
            raise ConfigurationError(
                f"corridor_width must be at least 1, got {self.corridor_width}"
            )

        smallest_side = min(self.width, self.height)
        if self.min_room_size > smallest_side:
            raise ConfigurationError(
                f"min_room_size {self.min_room_size} does not fit in a "
                f"{self.width}x{self.height} world"
            )
        if self.corridor_width >= smallest_side:
            raise ConfigurationError(
                f"corridor_width {self.corridor_width} must be smaller than the "
                f"world's smallest side ({smallest_side})"
            )
