import json
from pathlib import Path

import pygame
import pytest

from mmoclient.resources import ResourceError, ResourceRegistry, font_registry, texture_registry


def _text_loader(path):
    return Path(path).read_text()


def test_load_and_get(tmp_path):
    file = tmp_path / "a.txt"
    file.write_text("content")
    registry = ResourceRegistry(_text_loader, "textures")
    assert registry.load("a", str(file)) is True
    assert registry.get("a") == "content"


def test_duplicate_key_keeps_first(tmp_path):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("one")
    second.write_text("two")
    registry = ResourceRegistry(_text_loader, "textures")
    registry.load("a", str(first))
    assert registry.load("a", str(second)) is False
    assert registry.get("a") == "one"


def test_missing_key():
    registry = ResourceRegistry(_text_loader, "textures")
    with pytest.raises(ResourceError, match="Texture not found: nope"):
        registry.get("nope")


def test_loader_failure_wrapped(tmp_path):
    registry = ResourceRegistry(_text_loader, "fonts")
    missing = str(tmp_path / "missing.ttf")
    with pytest.raises(ResourceError, match="Failed to load font"):
        registry.load("f", missing)
    assert "f" not in registry


def test_load_all(tmp_path):
    (tmp_path / "x.txt").write_text("X")
    (tmp_path / "y.txt").write_text("Y")
    manifest = tmp_path / "set.json"
    manifest.write_text(json.dumps({"textures": [
        {"key": "x", "path": str(tmp_path / "x.txt")},
        {"key": "y", "path": str(tmp_path / "y.txt")},
    ]}))
    registry = ResourceRegistry(_text_loader, "textures")
    registry.load_all(str(manifest))
    assert (registry.get("x"), registry.get("y")) == ("X", "Y")


def test_load_all_missing_section(tmp_path):
    manifest = tmp_path / "set.json"
    manifest.write_text(json.dumps({"fonts": []}))
    registry = ResourceRegistry(_text_loader, "textures")
    registry.load_all(str(manifest))
    assert "anything" not in registry


def test_load_all_missing_file(tmp_path):
    registry = ResourceRegistry(_text_loader, "textures")
    with pytest.raises(ResourceError, match="Failed to open JSON file"):
        registry.load_all(str(tmp_path / "none.json"))


def test_shared_registries_are_singletons():
    assert texture_registry() is texture_registry()
    assert font_registry() is font_registry()
    assert texture_registry() is not font_registry()


def test_texture_registry_loads_image(tmp_path):
    surface = pygame.Surface((4, 3))
    surface.fill((10, 20, 30))
    path = tmp_path / "tex.png"
    pygame.image.save(surface, str(path))
    texture_registry().load("unit-test-texture", str(path))
    loaded = texture_registry().get("unit-test-texture")
    assert loaded.get_size() == (4, 3)
    assert loaded.get_at((0, 0))[:3] == (10, 20, 30)


def test_font_registry_loads_font():
    path = Path(pygame.__file__).parent / pygame.font.get_default_font()
    font_registry().load("unit-test-font", str(path))
    face = font_registry().get("unit-test-font")
    assert face.sized(12) is face.sized(12)
    assert face.sized(24).get_height() > face.sized(12).get_height()