"""
Tile grid produced by the dungeon generator.

The grid holds two parallel numpy arrays, both shaped (height, width) and
indexed [y, x]:

- terrain: the TileType of every tile
- room_owner: the id of the room a tile belongs to, or NO_ROOM

plus the list of rooms in id order.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple


# room_owner value for tiles that belong to no room (corridors, empty space)
NO_ROOM = -1


class TileType(IntEnum):
    """
    Terrain kinds.

    The generator only ever writes EMPTY and FLOOR. CORRIDOR and WALL are
    available to callers that want to post-process the layout.
    """

    EMPTY = 0
    FLOOR = 1
    CORRIDOR = 2
    WALL = 3


@dataclass(frozen=True)
class Region:
    """An axis-aligned rectangle, measured in tiles."""

    x: int
    y: int
    width: int
    height: int

    @property
    def x_max(self) -> int:
        """First column to the right of the region (exclusive)."""
        return self.x + self.width

    @property
    def y_max(self) -> int:
        """First row below the region (exclusive)."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, x: int, y: int) -> bool:
        """Check if the tile (x, y) lies inside this region."""
        return self.x <= x < self.x_max and self.y <= y < self.y_max

    def contains_region(self, other: "Region") -> bool:
        """Check if other lies entirely inside this region."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.x_max <= self.x_max
            and other.y_max <= self.y_max
        )

    def overlaps(self, other: "Region") -> bool:
        """Check if the two regions share at least one tile."""
        return (
            self.x < other.x_max
            and other.x < self.x_max
            and self.y < other.y_max
            and other.y < self.y_max
        )


@dataclass
class Room:
    """A rectangular walkable room placed inside a partition leaf."""

    id: int
    bounds: Region

    # (x, y) of every tile in the room, filled in when the room is carved
    tiles: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def center(self) -> Tuple[int, int]:
        """Tile used as the anchor for corridors."""
        return self.bounds.center

    def contains(self, x: int, y: int) -> bool:
        return self.bounds.contains(x, y)


class Grid:
    """
    Fixed-size tile grid with room ownership.

    Reads outside the grid raise IndexError. Writes outside the grid are
    dropped, so corridors can be carved without clipping them first.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width: int = width
        self.height: int = height

        self.terrain: np.ndarray = np.full((height, width), int(TileType.EMPTY), dtype=int)
        self.room_owner: np.ndarray = np.full((height, width), NO_ROOM, dtype=int)

        # Room ids are indices into this list
        self.rooms: List[Room] = []

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, rooms={len(self.rooms)})"

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if the tile (x, y) lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_bounds(self, x: int, y: int) -> None:
        # numpy would silently wrap negative indices, so check explicitly
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Tile ({x}, {y}) is outside the {self.width}x{self.height} grid"
            )

    def get_terrain(self, x: int, y: int) -> TileType:
        """Return the terrain at (x, y). Raises IndexError outside the grid."""
        self._check_bounds(x, y)
        return TileType(self.terrain[y, x])

    def get_room_owner(self, x: int, y: int) -> int:
        """Return the owning room id at (x, y), or NO_ROOM."""
        self._check_bounds(x, y)
        return int(self.room_owner[y, x])

    def set_terrain(self, x: int, y: int, tile: TileType) -> bool:
        """
        Set the terrain at (x, y).

        Returns False (and changes nothing) if the tile is outside the grid.
        """
        if not self.in_bounds(x, y):
            return False
        self.terrain[y, x] = tile
        return True

    def carve_floor(self, x: int, y: int) -> bool:
        """Turn (x, y) into floor, leaving its room ownership untouched."""
        return self.set_terrain(x, y, TileType.FLOOR)

    def add_room(self, bounds: Region) -> Room:
        """
        Register a new room and stamp it onto the grid.

        The room gets the next sequential id. Every tile inside bounds becomes
        FLOOR owned by the room, and is appended to room.tiles.

        Raises:
            IndexError: If bounds is not fully inside the grid
        """
        if not Region(0, 0, self.width, self.height).contains_region(bounds):
            raise IndexError(
                f"Room bounds {bounds} do not fit in the {self.width}x{self.height} grid"
            )

        room = Room(id=len(self.rooms), bounds=bounds)
        self.rooms.append(room)

        for x in range(bounds.x, bounds.x_max):
            for y in range(bounds.y, bounds.y_max):
                self.terrain[y, x] = TileType.FLOOR
                self.room_owner[y, x] = room.id
                room.tiles.append((x, y))

        return room

    def is_floor(self, x: int, y: int) -> bool:
        """Check if (x, y) is floor. Tiles outside the grid are not floor."""
        return self.in_bounds(x, y) and self.terrain[y, x] == TileType.FLOOR

    def room_at(self, x: int, y: int) -> Optional[Room]:
        """Return the room that owns (x, y), or None for corridors and empty tiles."""
        owner = self.get_room_owner(x, y)
        if owner == NO_ROOM:
            return None
        return self.rooms[owner]

    def floor_tiles(self) -> List[Tuple[int, int]]:
        """All floor tiles as (x, y), in row-major order."""
        ys, xs = np.where(self.terrain == TileType.FLOOR)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def corridor_tiles(self) -> List[Tuple[int, int]]:
        """Floor tiles that belong to no room, as (x, y)."""
        mask = (self.terrain == TileType.FLOOR) & (self.room_owner == NO_ROOM)
        ys, xs = np.where(mask)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]
