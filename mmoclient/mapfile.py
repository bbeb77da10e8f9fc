"""Tile map storage, the binary map format and its JSON exporter."""

from __future__ import annotations

import argparse
import json
import struct
import sys
from enum import IntEnum
from pathlib import Path

import pygame

from .defines import TILE_LEN, TILE_SIZE

DEFAULT_MAP_PATH = "../Resource/map.bin"
_HEADER = struct.Struct("<II")


class TileType(IntEnum):
    """Ground kinds; on disk each is stored as its value plus one."""

    GRASS = 0
    WATER = 1
    HOUSE = 2
    TREE = 3


class TileSet:
    """Tile images keyed by tile type, scaled to the tile size."""

    def __init__(self) -> None:
        self._tiles: dict[TileType, pygame.Surface] = {}

    def add_tile(self, tile_type: TileType, texture: pygame.Surface) -> None:
        """Register the image for a tile type; an existing one is kept."""
        tile_type = TileType(tile_type)
        if tile_type in self._tiles:
            return
        side = int(TILE_SIZE)
        self._tiles[tile_type] = pygame.transform.scale(texture, (side, side))

    def get_tile(self, tile_type: TileType) -> pygame.Surface:
        """Return the image for a tile type."""
        try:
            return self._tiles[TileType(tile_type)]
        except (KeyError, ValueError):
            raise KeyError(f"no tile registered for {tile_type!r}") from None


class WorldMap:
    """A rectangular grid of tiles."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError("map dimensions must not be negative")
        self.width = width
        self.height = height
        self._tiles = [TileType.GRASS] * (width * height)

    @property
    def area(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def load(cls, path: str | Path = DEFAULT_MAP_PATH) -> WorldMap:
        """Read a map: two little-endian uint32 dimensions, then one byte per tile."""
        data = Path(path).read_bytes()
        if len(data) < _HEADER.size:
            raise ValueError("map file shorter than its header")
        width, height = _HEADER.unpack_from(data)
        count = width * height
        body = data[_HEADER.size:_HEADER.size + count]
        if len(body) < count:
            raise ValueError(f"map file holds {len(body)} of {count} tiles")
        try:
            tiles = [TileType(value - 1) for value in body]
        except ValueError as exc:
            raise ValueError(f"map file holds an unknown tile: {exc}") from exc
        world = cls()
        world.width, world.height = width, height
        world._tiles = tiles
        return world

    def contains(self, x: int, y: int) -> bool:
        """Whether the tile coordinate lies inside the map."""
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> TileType:
        if not self.contains(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} map")
        return self._tiles[y * self.width + x]

    def visible_range(self, center_x: int, center_y: int) -> tuple[range, range]:
        """Column and row ranges drawn around a tile, clamped to the map."""
        xs = range(max(0, center_x - TILE_LEN), min(self.width - 1, center_x + TILE_LEN) + 1)
        ys = range(max(0, center_y - TILE_LEN), min(self.height - 1, center_y + TILE_LEN) + 1)
        return xs, ys

    def draw(
        self,
        surface: pygame.Surface,
        tiles: TileSet,
        client_pos: tuple[int, int],
        offset: tuple[float, float] = (0.0, 0.0),
    ) -> None:
        """Draw the tiles around ``client_pos``; ``offset`` is the camera's top-left in pixels."""
        xs, ys = self.visible_range(*client_pos)
        for y in ys:
            for x in xs:
                position = (round(x * TILE_SIZE - offset[0]), round(y * TILE_SIZE - offset[1]))
                surface.blit(tiles.get_tile(self.tile_at(x, y)), position)


def export_json_map(json_path: str | Path, bin_path: str | Path) -> tuple[int, int]:
    """Convert a tile-editor JSON map (first layer) to the binary map format."""
    with open(json_path, encoding="utf-8") as file:
        root = json.load(file)
    width = int(root["width"])
    height = int(root["height"])
    data = root["layers"][0]["data"]
    if len(data) != width * height:
        raise ValueError(f"layer holds {len(data)} tiles, expected {width * height}")
    payload = _HEADER.pack(width, height) + bytes(int(tile) & 0xFF for tile in data)
    Path(bin_path).write_bytes(payload)
    return width, height


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export a JSON tile map to the binary map format.")
    parser.add_argument("json_path", nargs="?", default="my_tile.json")
    parser.add_argument("bin_path", nargs="?", default="map.bin")
    args = parser.parse_args(argv)
    try:
        width, height = export_json_map(args.json_path, args.bin_path)
    except (OSError, ValueError, KeyError, IndexError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Width: {width}, Height: {height}")
    print("Export Success!")
    return 0


if __name__ == "__main__":
    sys.exit(main())