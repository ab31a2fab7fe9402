"""
BSP Dungeon Generation Algorithm
================================

We carve the world into a binary tree of rectangles, put one room in every
leaf and join sibling subtrees with corridors.

1. Start with a single partition covering the whole world (depth 0)
2. Split partitions recursively:
   a. Stop at max_split_depth, or when a side is shorter than two minimum rooms
   b. Cut across the longer side (pick at random if the region is near-square)
   c. Cut anywhere that leaves at least min_room_size on both sides
3. Carve a room into every leaf, keeping ROOM_MARGIN tiles of clearance
   where the leaf is large enough
4. For every internal node, pick a random room from each child subtree and
   join their centers with an L-shaped corridor
5. Return the grid

Every internal node contributes one corridor, so a tree with N leaves gets
N - 1 corridors and all rooms end up connected.
"""

import random
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import ROOM_MARGIN, GeneratorConfig
from .grid import Grid, Region, Room
from .partition import PartitionTree, split_node


@dataclass(frozen=True)
class Corridor:
    """An L-shaped corridor carved between the centers of two rooms."""

    room_a: int
    room_b: int
    start: Tuple[int, int]
    end: Tuple[int, int]

    # True if the horizontal leg starts at room_a, False if the vertical one does
    horizontal_first: bool

    @property
    def corner(self) -> Tuple[int, int]:
        """The tile where the two legs meet."""
        if self.horizontal_first:
            return (self.end[0], self.start[1])
        return (self.start[0], self.end[1])


def _room_offset(rng: random.Random, slack: int) -> int:
    """
    Pick how far a room sits from its leaf's edge along one axis.

    slack is the leaf extent minus the room extent. The offset keeps
    ROOM_MARGIN clearance on both sides when there is room for it; when the
    range collapses or inverts we use its low end instead of drawing.
    """
    low = min(ROOM_MARGIN, slack)
    high = max(low, slack - ROOM_MARGIN)
    if high == low:
        return low
    return rng.randint(low, high)


class BSPGenerator:
    """
    Generates dungeon layouts by binary space partitioning.

    The generator owns its configuration and its random source. State from
    the most recent run (tree, leaf_nodes, corridors) stays available for
    inspection until the next call to generate().
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[random.Random] = None,
        debug: bool = False,
    ) -> None:
        self.config: GeneratorConfig = config if config is not None else GeneratorConfig()
        self.rng: random.Random = rng if rng is not None else random.Random()
        self._debug: bool = debug

        self.grid: Optional[Grid] = None
        self.tree: Optional[PartitionTree] = None
        self.leaf_nodes: List[int] = []
        self.corridors: List[Corridor] = []

    def set_debug(self, debug: bool) -> None:
        """Enable or disable progress output on stderr."""
        self._debug = debug

    def _log(self, message: str) -> None:
        if self._debug:
            print(f"[BSPGenerator] {message}", file=sys.stderr)

    def generate(self, rng: Optional[random.Random] = None) -> Grid:
        """
        Generate a new dungeon layout.

        Parameters:
            rng: If given, replaces the generator's random source for this
                 and later runs.

        Returns:
            The populated Grid

        Raises:
            ConfigurationError: If the configuration is invalid. Nothing is
                                generated in that case.
        """
        self.config.validate()
        if rng is not None:
            self.rng = rng

        config = self.config
        self.grid = Grid(config.width, config.height)
        self.tree = PartitionTree(Region(0, 0, config.width, config.height))
        self.leaf_nodes = []
        self.corridors = []

        split_node(self.tree, PartitionTree.ROOT, config, self.rng, self.leaf_nodes)
        self._log(
            f"Partitioned {config.width}x{config.height} world into "
            f"{len(self.leaf_nodes)} leaves (depth {self.tree.max_depth})"
        )

        self._carve_rooms(PartitionTree.ROOT)
        self._log(f"Carved {len(self.grid.rooms)} rooms")

        self._connect_subtrees(PartitionTree.ROOT)
        self._log(f"Carved {len(self.corridors)} corridors")

        return self.grid

    def _carve_rooms(self, index: int) -> None:
        """Put a room in every leaf below index, left to right."""
        node = self.tree.node(index)
        if not node.is_leaf:
            self._carve_rooms(node.left)
            self._carve_rooms(node.right)
            return

        leaf = node.region
        min_size = self.config.min_room_size

        room_width = max(leaf.width - ROOM_MARGIN * 2, min_size)
        room_height = max(leaf.height - ROOM_MARGIN * 2, min_size)

        offset_x = _room_offset(self.rng, leaf.width - room_width)
        offset_y = _room_offset(self.rng, leaf.height - room_height)

        bounds = Region(leaf.x + offset_x, leaf.y + offset_y, room_width, room_height)
        node.room = self.grid.add_room(bounds)

    def _connect_subtrees(self, index: int) -> None:
        """Join the two children of every internal node below index."""
        node = self.tree.node(index)
        if node.is_leaf:
            return

        room_a = self._random_room(node.left)
        room_b = self._random_room(node.right)
        self._carve_corridor(room_a, room_b)

        self._connect_subtrees(node.left)
        self._connect_subtrees(node.right)

    def _random_room(self, index: int) -> Room:
        """Descend from index through randomly chosen children to a leaf's room."""
        node = self.tree.node(index)
        while not node.is_leaf:
            next_index = node.left if self.rng.random() > 0.5 else node.right
            node = self.tree.node(next_index)
        return node.room

    def _carve_corridor(self, room_a: Room, room_b: Room) -> Corridor:
        start_x, start_y = room_a.center
        end_x, end_y = room_b.center

        horizontal_first = self.rng.random() > 0.5
        if horizontal_first:
            self._carve_horizontal(start_x, end_x, start_y)
            self._carve_vertical(start_y, end_y, end_x)
        else:
            self._carve_vertical(start_y, end_y, start_x)
            self._carve_horizontal(start_x, end_x, end_y)

        corridor = Corridor(
            room_a=room_a.id,
            room_b=room_b.id,
            start=(start_x, start_y),
            end=(end_x, end_y),
            horizontal_first=horizontal_first,
        )
        self.corridors.append(corridor)
        return corridor

    def _carve_horizontal(self, x_start: int, x_end: int, y: int) -> None:
        half = self.config.corridor_width // 2
        for x in range(min(x_start, x_end), max(x_start, x_end) + 1):
            for w in range(-half, half + 1):
                self.grid.carve_floor(x, y + w)

    def _carve_vertical(self, y_start: int, y_end: int, x: int) -> None:
        half = self.config.corridor_width // 2
        for y in range(min(y_start, y_end), max(y_start, y_end) + 1):
            for w in range(-half, half + 1):
                self.grid.carve_floor(x + w, y)


def generate_dungeon(
    config: Optional[GeneratorConfig] = None,
    seed: Optional[int] = None,
) -> Grid:
    """
    Generate one dungeon layout with its own random source.

    Parameters:
        config: Generation settings; defaults to GeneratorConfig()
        seed: Seed for the random source. The same config and seed always
              produce the same grid.

    Returns:
        The populated Grid
    """
    generator = BSPGenerator(config, rng=random.Random(seed))
    return generator.generate()
