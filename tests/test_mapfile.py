import json
import struct

import pygame
import pytest

from mmoclient.defines import TILE_LEN, TILE_SIZE
from mmoclient.mapfile import TileSet, TileType, WorldMap, export_json_map, main


@pytest.fixture
def json_map(tmp_path):
    path = tmp_path / "my_tile.json"
    path.write_text(json.dumps({"width": 3, "height": 2, "layers": [{"data": [1, 2, 3, 4, 1, 2]}]}))
    return path


def test_export_writes_binary(json_map, tmp_path):
    out = tmp_path / "map.bin"
    assert export_json_map(json_map, out) == (3, 2)
    assert out.read_bytes() == struct.pack("<II", 3, 2) + bytes([1, 2, 3, 4, 1, 2])


def test_export_then_load(json_map, tmp_path):
    out = tmp_path / "map.bin"
    export_json_map(json_map, out)
    world = WorldMap.load(out)
    assert world.area == (3, 2)
    assert [world.tile_at(x, 0) for x in range(3)] == [TileType.GRASS, TileType.WATER, TileType.HOUSE]
    assert world.tile_at(0, 1) == TileType.TREE


def test_export_size_mismatch(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"width": 2, "height": 2, "layers": [{"data": [1, 1, 1]}]}))
    with pytest.raises(ValueError):
        export_json_map(path, tmp_path / "out.bin")


def test_main_success(json_map, tmp_path, capsys):
    out = tmp_path / "map.bin"
    assert main([str(json_map), str(out)]) == 0
    assert "Export Success!" in capsys.readouterr().out
    assert WorldMap.load(out).area == (3, 2)


def test_main_missing_input(tmp_path):
    assert main([str(tmp_path / "none.json"), str(tmp_path / "o.bin")]) == 1


def test_load_truncated(tmp_path):
    path = tmp_path / "map.bin"
    path.write_bytes(struct.pack("<II", 2, 2) + bytes([1, 1, 1]))
    with pytest.raises(ValueError):
        WorldMap.load(path)


def test_load_unknown_tile(tmp_path):
    path = tmp_path / "map.bin"
    path.write_bytes(struct.pack("<II", 1, 1) + bytes([0]))
    with pytest.raises(ValueError):
        WorldMap.load(path)


def test_new_map_is_grass():
    world = WorldMap(4, 5)
    assert {world.tile_at(x, y) for x in range(4) for y in range(5)} == {TileType.GRASS}


def test_contains_and_bounds():
    world = WorldMap(4, 5)
    assert world.contains(3, 4)
    assert not world.contains(4, 0)
    assert not world.contains(-1, 0)
    with pytest.raises(IndexError):
        world.tile_at(0, 5)


def test_visible_range():
    world = WorldMap(100, 100)
    xs, ys = world.visible_range(50, 50)
    assert len(xs) == len(ys) == 2 * TILE_LEN + 1
    assert 50 in xs and 50 in ys
    corner_x, corner_y = world.visible_range(0, 0)
    assert corner_x.start == 0 and corner_y.start == 0
    far_x, far_y = world.visible_range(99, 99)
    assert far_x.stop == 100 and far_y.stop == 100


def _solid(color):
    surface = pygame.Surface((8, 8))
    surface.fill(color)
    return surface


def test_tileset_keeps_first_and_scales():
    tiles = TileSet()
    tiles.add_tile(TileType.GRASS, _solid((0, 255, 0)))
    tiles.add_tile(TileType.GRASS, _solid((255, 0, 0)))
    tile = tiles.get_tile(TileType.GRASS)
    assert tile.get_size() == (int(TILE_SIZE), int(TILE_SIZE))
    assert tile.get_at((0, 0))[:3] == (0, 255, 0)


def test_tileset_missing():
    with pytest.raises(KeyError):
        TileSet().get_tile(TileType.WATER)


def test_draw_blits_tiles(json_map, tmp_path):
    out = tmp_path / "map.bin"
    export_json_map(json_map, out)
    world = WorldMap.load(out)
    tiles = TileSet()
    colors = {
        TileType.GRASS: (0, 255, 0),
        TileType.WATER: (0, 0, 255),
        TileType.HOUSE: (255, 0, 0),
        TileType.TREE: (255, 255, 0),
    }
    for tile_type, color in colors.items():
        tiles.add_tile(tile_type, _solid(color))
    side = int(TILE_SIZE)
    surface = pygame.Surface((3 * side, 2 * side))
    world.draw(surface, tiles, (1, 1), (0, 0))
    for x in range(3):
        for y in range(2):
            expected = colors[world.tile_at(x, y)]
            assert surface.get_at((x * side + 1, y * side + 1))[:3] == expected