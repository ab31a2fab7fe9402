"""BSP dungeon layout generation."""

from bsp_dungeon.config import (
    ROOM_MARGIN,
    ConfigurationError,
    GeneratorConfig,
)
from bsp_dungeon.grid import NO_ROOM, Grid, Region, Room, TileType
from bsp_dungeon.partition import PartitionNode, PartitionTree, split_node
from bsp_dungeon.dungeon_gen import BSPGenerator, Corridor, generate_dungeon
