"""
Binary space partitioning of the dungeon world.

The tree is stored as an arena: PartitionTree.nodes is a flat list and
children are referenced by their index in that list. Index 0 is the root.
"""

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .config import GeneratorConfig
from .grid import Region, Room


@dataclass
class PartitionNode:
    """One rectangular sub-area of the world."""

    region: Region
    depth: int = 0

    # Indices into PartitionTree.nodes, set together by attach_children
    left: Optional[int] = None
    right: Optional[int] = None

    # Only leaves get a room, during room carving
    room: Optional[Room] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


class PartitionTree:
    """Arena holding every node of one partition tree."""

    ROOT = 0

    def __init__(self, region: Region) -> None:
        self.nodes: List[PartitionNode] = [PartitionNode(region=region, depth=0)]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> PartitionNode:
        return self.nodes[self.ROOT]

    def node(self, index: int) -> PartitionNode:
        return self.nodes[index]

    def attach_children(self, index: int, left: Region, right: Region) -> Tuple[int, int]:
        """
        Give the node at index its two children.

        Returns: (left_index, right_index)

        Raises:
            ValueError: If the node already has children
        """
        parent = self.nodes[index]
        if not parent.is_leaf:
            raise ValueError(f"Node {index} has already been split")

        left_index = len(self.nodes)
        self.nodes.append(PartitionNode(region=left, depth=parent.depth + 1))
        right_index = len(self.nodes)
        self.nodes.append(PartitionNode(region=right, depth=parent.depth + 1))

        parent.left = left_index
        parent.right = right_index
        return left_index, right_index

    def children(self, index: int) -> Optional[Tuple[int, int]]:
        """Return (left_index, right_index), or None for a leaf."""
        node = self.nodes[index]
        if node.is_leaf:
            return None
        return node.left, node.right

    def walk(self, index: int = ROOT) -> Iterator[int]:
        """Yield node indices in pre-order (node, left subtree, right subtree)."""
        stack = [index]
        while stack:
            current = stack.pop()
            yield current
            node = self.nodes[current]
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)

    def leaves(self) -> List[int]:
        """Leaf indices, left to right."""
        return [i for i in self.walk() if self.nodes[i].is_leaf]

    def internal_nodes(self) -> List[int]:
        return [i for i in self.walk() if not self.nodes[i].is_leaf]

    @property
    def leaf_count(self) -> int:
        return len(self.leaves())

    @property
    def max_depth(self) -> int:
        return max(node.depth for node in self.nodes)

    def regions(self) -> List[Region]:
        """Snapshot of every node's region, in arena order."""
        return [node.region for node in self.nodes]


def _cut(region: Region, vertical: bool, position: int) -> Tuple[Region, Region]:
    """Cut region along a vertical (x = position) or horizontal (y = position) line."""
    if vertical:
        left = Region(region.x, region.y, position - region.x, region.height)
        right = Region(position, region.y, region.x_max - position, region.height)
    else:
        left = Region(region.x, region.y, region.width, position - region.y)
        right = Region(region.x, position, region.width, region.y_max - position)
    return left, right


def split_node(
    tree: PartitionTree,
    index: int,
    config: GeneratorConfig,
    rng: random.Random,
    leaves: List[int],
) -> None:
    """
    Recursively split the node at index until it and its descendants are leaves.

    A node stops splitting once it reaches config.max_split_depth or either
    side is shorter than two minimum rooms. Every leaf index is appended to
    leaves, left to right.
    """
    node = tree.node(index)
    region = node.region
    min_size = config.min_room_size

    if (
        node.depth >= config.max_split_depth
        or region.width < min_size * 2
        or region.height < min_size * 2
    ):
        leaves.append(index)
        return

    # Split across the longer side; near-square regions pick at random
    split_vertical = region.width > region.height
    if abs(region.width - region.height) < min_size:
        split_vertical = rng.random() > 0.5

    # Both halves keep at least min_size tiles
    if split_vertical:
        position = rng.randint(region.x + min_size, region.x_max - min_size)
    else:
        position = rng.randint(region.y + min_size, region.y_max - min_size)

    left_region, right_region = _cut(region, split_vertical, position)
    left_index, right_index = tree.attach_children(index, left_region, right_region)

    split_node(tree, left_index, config, rng, leaves)
    split_node(tree, right_index, config, rng, leaves)
